# display.py
"""Text rendering of runtime values for the REPL and script expectations."""

from __future__ import annotations
import math


def format_number(x: float) -> str:
    """Render a float the way the REPL shows it.

    Integral finite values drop the fractional part (3.0 -> "3");
    everything else uses Python's shortest round-trip repr.
    """
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    if x == int(x) and abs(x) < 1e16:
        # -0.0 prints as 0
        return str(int(x))
    return repr(x)


def format_matrix(m) -> str:
    """Multi-line rendering: '[', one right-aligned row per line, ']'."""
    if m.is_empty():
        return "[]"
    cells = [[format_number(x) for x in row] for row in m.rows()]
    widths = [max(len(row[c]) for row in cells) for c in range(m.ncols)]
    lines = ["["]
    for row in cells:
        lines.append("  " + "  ".join(text.rjust(w) for text, w in zip(row, widths)))
    lines.append("]")
    return "\n".join(lines)


def format_value(value) -> str:
    from runtime.matrix import Matrix
    if isinstance(value, Matrix):
        return format_matrix(value)
    return format_number(value.value)


def format_compact(value) -> str:
    """Single-line rendering: 3, [1,2;3,4], []."""
    from runtime.matrix import Matrix
    if isinstance(value, Matrix):
        rows = [",".join(format_number(x) for x in row) for row in value.rows()]
        return "[" + ";".join(rows) + "]"
    return format_number(value.value)

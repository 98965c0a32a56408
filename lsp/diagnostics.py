"""Convert ConVector Diagnostic objects to LSP Diagnostic objects."""
from __future__ import annotations

from lsprotocol import types
from evaluation.diagnostics import Diagnostic as ConVectorDiagnostic

# Codes reported as warnings rather than errors: the statement was rejected
# but nothing in the document is malformed.
WARNING_CODES = {
    "NonexistantVar",
}


def to_lsp_diagnostic(d: ConVectorDiagnostic, source_lines: list[str]) -> types.Diagnostic:
    """Convert a ConVector Diagnostic to an LSP Diagnostic.

    Args:
        d: ConVector diagnostic with 1-based line numbering
        source_lines: Source code split into lines (for range calculation)

    Returns:
        LSP Diagnostic with 0-based line numbering
    """
    line_num = d.line - 1

    # Span from the reported column (or line start) to the end of the line
    if 0 <= line_num < len(source_lines):
        end_char = len(source_lines[line_num])
    else:
        end_char = 0

    start_char = d.col - 1 if d.col else 0
    start_char = min(start_char, end_char)
    range_ = types.Range(
        start=types.Position(line=line_num, character=start_char),
        end=types.Position(line=line_num, character=end_char),
    )

    if d.code in WARNING_CODES:
        severity = types.DiagnosticSeverity.Warning
    else:
        severity = types.DiagnosticSeverity.Error

    return types.Diagnostic(
        range=range_,
        severity=severity,
        code=d.code if d.code else None,
        source="convector",
        message=d.message,
    )

"""Hover provider for showing variable values."""
from __future__ import annotations

import re
from typing import Optional
from lsprotocol import types
from runtime.display import format_value
from runtime.env import Env
from runtime.matrix import Matrix

IDENTIFIER_RE = re.compile(r"[A-Za-z_]\w*")


def get_hover(env: Env, source: str, line: int, character: int) -> Optional[types.Hover]:
    """Get hover information for a variable at the given position.

    Args:
        env: Environment left by evaluating the whole document
        source: Full source code text
        line: Zero-indexed line number
        character: Zero-indexed character position in line

    Returns:
        Hover object with the variable's final value, or None if no bound
        variable is at the cursor
    """
    lines = source.splitlines()
    if not (0 <= line < len(lines)):
        return None

    line_text = lines[line]
    if not (0 <= character <= len(line_text)):
        return None

    # Comments are not code
    comment_start = line_text.find("%")
    if comment_start != -1 and character >= comment_start:
        return None

    for match in IDENTIFIER_RE.finditer(line_text):
        start, end = match.span()
        if start <= character < end:
            word = match.group(0)
            break
    else:
        return None

    value = env.lookup(word)
    if value is None:
        return None

    if isinstance(value, Matrix):
        rows, cols = value.shape
        hover_text = f"(convector) `{word}`: {rows}x{cols} matrix\n```\n{format_value(value)}\n```"
    else:
        hover_text = f"(convector) `{word}` = `{format_value(value)}`"

    return types.Hover(
        contents=types.MarkupContent(
            kind=types.MarkupKind.Markdown,
            value=hover_text,
        ),
        range=types.Range(
            start=types.Position(line=line, character=start),
            end=types.Position(line=line, character=end),
        ),
    )

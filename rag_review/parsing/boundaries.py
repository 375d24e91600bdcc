"""
End-of-definition heuristic for nodes without end position metadata.

This is a greedy forward scan, not a structural matcher. Python blocks
have no closing token, so the first later line that sits at or left of
the definition's own indentation is taken as the token that closes it.
Known misses, kept on purpose because chunk boundaries depend on them:

* a multi-line signature whose closing ``):`` sits at the ``def`` column
  ends the block at the line before it;
* a column-zero line inside a triple-quoted string ends the block early.

When the parser provides ``end_lineno`` this module is not used.
"""

from typing import List

from rag_review.parsing.lines import indentation


def _is_code(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith("#")


def _last_code_line(lines: List[str], start_line: int, stop_before: int) -> int:
    for number in range(stop_before - 1, start_line, -1):
        if _is_code(lines[number - 1]):
            return number
    return start_line


def estimate_end_line(lines: List[str], start_line: int) -> int:
    """
    Estimate the 1-based last line of the definition starting at ``start_line``.

    Falls back to the last non-blank line of the file when nothing closes
    the block.
    """
    if not lines:
        return start_line
    start_line = max(1, min(start_line, len(lines)))
    start_indent = indentation(lines[start_line - 1])

    for number in range(start_line + 1, len(lines) + 1):
        line = lines[number - 1]
        if _is_code(line) and indentation(line) <= start_indent:
            return _last_code_line(lines, start_line, number)

    return _last_code_line(lines, start_line, len(lines) + 1)

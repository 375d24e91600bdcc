import re
from typing import List

_NEWLINE = re.compile(r"\r\n|\r")


def split_lines(text: str) -> List[str]:
    """
    Split source into lines the way line numbers are counted.

    Only ``\\n``, ``\\r\\n`` and ``\\r`` end a line (``str.splitlines`` also
    breaks on form feeds and friends, which would shift numbering).
    A trailing newline does not open an extra empty line.
    """
    lines = _NEWLINE.sub("\n", text).split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


def indentation(line: str) -> int:
    return len(line) - len(line.lstrip())

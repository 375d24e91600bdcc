"""
Unified diff analysis.

Parses ``git diff`` (or plain ``diff -u``) output into changed files and
hunks, and derives the search queries used for context retrieval.
Parsing is total: any text yields a DiffAnalysis, possibly empty.
"""

import re
from typing import Iterable, List, Optional, Tuple

from rag_review.core.models import ChangedFile, DiffAnalysis, FileStatus, Hunk, ModifiedSymbol
from rag_review.parsing.languages import detect_language

MAX_QUERIES = 10
MAX_CODE_QUERIES = 5
MAX_CODE_QUERIES_PER_HUNK = 3
MIN_CODE_QUERY_CHARS = 20
MIN_CONTEXT_QUERY_CHARS = 5

_GIT_FILE_SEPARATOR = re.compile(r"^diff --git ", re.MULTILINE)
_PLAIN_FILE_SEPARATOR = re.compile(r"^(?=--- [^\n]*\n\+\+\+ )", re.MULTILINE)
_HUNK_SEPARATOR = re.compile(r"^@@", re.MULTILINE)

_GIT_PATHS = re.compile(r"a/(.+?)\s+b/(.+)")
_HUNK_HEADER = re.compile(r"-(\d+),?(\d*)\s+\+(\d+),?(\d*)\s*@@(.*)")

DEV_NULL = "/dev/null"


def _split_file_blocks(diff_text: str) -> List[str]:
    if _GIT_FILE_SEPARATOR.search(diff_text):
        return _GIT_FILE_SEPARATOR.split(diff_text)[1:]
    # Plain unified diff: every block starts at its "--- old" header
    return [block for block in _PLAIN_FILE_SEPARATOR.split(diff_text) if block.startswith("--- ")]


def _header_path(line: str, marker: str) -> Optional[str]:
    """Path from a ``--- a/x`` / ``+++ b/x`` header, None for /dev/null."""
    path = line[len(marker):].split("\t", 1)[0].strip()
    if not path or path == DEV_NULL:
        return None
    if path.startswith(("a/", "b/")):
        path = path[2:]
    return path


def extract_paths(file_block: str) -> Tuple[Optional[str], Optional[str]]:
    """(old_path, new_path) for one per-file block."""
    header, _, _ = file_block.partition("\n@@")
    header_lines = header.split("\n")

    old_path = new_path = None
    match = _GIT_PATHS.search(header_lines[0])
    if match:
        old_path, new_path = match.group(1), match.group(2).strip()

    for line in header_lines:
        if line.startswith("--- "):
            old_path = _header_path(line, "--- ")
        elif line.startswith("+++ "):
            new_path = _header_path(line, "+++ ")

    return old_path, new_path


def determine_status(old_path: Optional[str], new_path: Optional[str]) -> FileStatus:
    if old_path is None:
        return FileStatus.ADDED
    if new_path is None:
        return FileStatus.DELETED
    if old_path == new_path:
        return FileStatus.MODIFIED
    return FileStatus.RENAMED


def _to_int(value: str, default: int) -> int:
    return int(value) if value else default


def parse_hunk_header(header: str) -> Tuple[int, int, int, int, str]:
    """
    ``-10,5 +12,7 @@ def handler`` -> (10, 5, 12, 7, "def handler").

    Missing counts default to 1; an unparsable header yields all ones and
    an empty context.
    """
    match = _HUNK_HEADER.search(header)
    if not match:
        return 1, 1, 1, 1, ""
    old_start, old_count, new_start, new_count, context = match.groups()
    try:
        return (
            _to_int(old_start, 1),
            _to_int(old_count, 1),
            _to_int(new_start, 1),
            _to_int(new_count, 1),
            context.strip(),
        )
    except ValueError:
        # int() refuses digit strings beyond sys.get_int_max_str_digits()
        return 1, 1, 1, 1, ""


def parse_hunk(hunk_text: str, file_path: Optional[str]) -> Hunk:
    header, _, body = hunk_text.partition("\n")
    old_start, old_count, new_start, new_count, context = parse_hunk_header(header)

    lines = body.split("\n") if body else []
    if lines and lines[-1] == "":
        lines.pop()

    return Hunk(
        old_start=old_start,
        old_count=old_count,
        new_start=new_start,
        new_count=new_count,
        context=context,
        lines=lines,
        file_path=file_path,
    )


def parse_file_block(file_block: str) -> ChangedFile:
    old_path, new_path = extract_paths(file_block)
    path = new_path or old_path

    hunks = [parse_hunk(text, path) for text in _HUNK_SEPARATOR.split(file_block)[1:]]

    return ChangedFile(
        path=path,
        old_path=old_path,
        status=determine_status(old_path, new_path),
        language=detect_language(path or ""),
        hunks=hunks,
    )


def _modified_symbols(files: Iterable[ChangedFile]) -> List[ModifiedSymbol]:
    symbols: List[ModifiedSymbol] = []
    seen = set()
    for changed in files:
        if changed.path is None:
            continue
        for hunk in changed.hunks:
            symbol = ModifiedSymbol(file=changed.path, name=hunk.context)
            if hunk.context and symbol not in seen:
                seen.add(symbol)
                symbols.append(symbol)
    return symbols


def parse(diff_text: str) -> DiffAnalysis:
    """Parse unified diff text. Never raises."""
    files = [parse_file_block(block) for block in _split_file_blocks(diff_text or "")]
    hunks = [hunk for changed in files for hunk in changed.hunks]

    return DiffAnalysis(
        files=files,
        hunks=hunks,
        added_lines=sum(len(hunk.added_lines) for hunk in hunks),
        removed_lines=sum(len(hunk.removed_lines) for hunk in hunks),
        modified_symbols=_modified_symbols(files),
    )


def _code_snippets(hunks: Iterable[Hunk]) -> List[str]:
    snippets: List[str] = []
    for hunk in hunks:
        taken = 0
        for line in hunk.added_lines:
            snippet = line[1:].strip()
            if len(snippet) <= MIN_CODE_QUERY_CHARS:
                continue
            snippets.append(snippet)
            taken += 1
            if taken == MAX_CODE_QUERIES_PER_HUNK:
                break
    return snippets[:MAX_CODE_QUERIES]


def generate_queries(analysis: DiffAnalysis) -> List[str]:
    """
    Search queries for a diff, most anchoring first: file paths, modified
    symbols, added code, then hunk context headers. De-duplicated in order
    and capped at MAX_QUERIES.
    """
    file_queries = [f"File: {changed.path}" for changed in analysis.files if changed.path]
    symbol_queries = [
        f"Function: {symbol.name} in {symbol.file}" for symbol in analysis.modified_symbols
    ]
    code_queries = _code_snippets(analysis.hunks)
    context_queries = [
        hunk.context for hunk in analysis.hunks if len(hunk.context) > MIN_CONTEXT_QUERY_CHARS
    ]

    queries = list(dict.fromkeys(file_queries + symbol_queries + code_queries + context_queries))
    return queries[:MAX_QUERIES]


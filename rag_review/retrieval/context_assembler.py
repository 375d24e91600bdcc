"""
Context assembly: turns raw vector-search hits into the bounded, ranked
context block injected into review prompts.
"""

from typing import Iterable, List

from rag_review.core.models import AssembledContext, RetrievedResult

DEFAULT_MAX_CHARS = 32_000

# Estimated formatting cost of one rendered block (header, fences, separator)
FORMAT_OVERHEAD = 100

CHARS_PER_TOKEN = 4

SEPARATOR = "\n\n---\n\n"

NO_CONTEXT_FOUND = "_No relevant context found._"


def deduplicate(results: Iterable[RetrievedResult]) -> List[RetrievedResult]:
    """Drop repeated ids, keeping the first occurrence."""
    seen = set()
    unique: List[RetrievedResult] = []
    for result in results:
        if result.id in seen:
            continue
        seen.add(result.id)
        unique.append(result)
    return unique


def rank(results: List[RetrievedResult]) -> List[RetrievedResult]:
    # sorted() is stable: equal distances keep input order
    return sorted(results, key=lambda result: result.distance)


def select_within_budget(results: List[RetrievedResult], max_chars: int) -> List[RetrievedResult]:
    """Greedy prefix of ``results`` whose estimated size fits ``max_chars``."""
    selected: List[RetrievedResult] = []
    used = 0
    for result in results:
        cost = len(result.document) + FORMAT_OVERHEAD
        if used + cost > max_chars:
            break
        selected.append(result)
        used += cost
    return selected


def format_result(result: RetrievedResult, include_metadata: bool = True) -> str:
    if not include_metadata:
        return f"```\n{result.document}\n```\n"

    metadata = result.metadata or {}
    file_path = metadata.get("file_path", "unknown")
    chunk_type = metadata.get("chunk_type", "code")
    chunk_name = metadata.get("chunk_name", "unknown")
    start_line = metadata.get("start_line", "?")
    end_line = metadata.get("end_line", "?")
    language = metadata.get("language", "text")

    return (
        f"## {file_path} ({chunk_type}: {chunk_name})\n"
        f"Lines {start_line}-{end_line}\n\n"
        f"```{language}\n{result.document}\n```\n"
    )


def empty_context(placeholder: str = NO_CONTEXT_FOUND) -> AssembledContext:
    return AssembledContext(
        text=placeholder,
        chunks_used=[],
        total_chars=len(placeholder),
        estimated_tokens=len(placeholder) // CHARS_PER_TOKEN,
    )


def assemble(
        results: Iterable[RetrievedResult],
        max_chars: int = DEFAULT_MAX_CHARS,
        include_metadata: bool = True,
) -> AssembledContext:
    """
    Deduplicate, rank by distance and pack results into a context string.

    Selection stops at the first result that would overflow the budget;
    it is not a best-fit packing. An empty selection renders the
    NO_CONTEXT_FOUND placeholder.

    The budget bounds the estimated cost, document length plus
    FORMAT_OVERHEAD per result. The rendered text stays within max_chars
    only while each header and separator fit in FORMAT_OVERHEAD; very long
    file paths or chunk names can push it past.
    """
    selected = select_within_budget(rank(deduplicate(results)), max_chars)
    if not selected:
        return empty_context()

    text = SEPARATOR.join(format_result(result, include_metadata) for result in selected)
    return AssembledContext(
        text=text,
        chunks_used=selected,
        total_chars=len(text),
        estimated_tokens=len(text) // CHARS_PER_TOKEN,
    )

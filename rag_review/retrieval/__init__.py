from .context_assembler import NO_CONTEXT_FOUND, assemble
from .diff_analyzer import generate_queries, parse
from .retriever import NO_QUERIES, Retriever

__all__ = [
    "NO_CONTEXT_FOUND",
    "NO_QUERIES",
    "Retriever",
    "assemble",
    "generate_queries",
    "parse",
]

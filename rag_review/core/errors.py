"""
Domain exceptions.

Transport failures (service unreachable, bad status) live in
``infra.exceptions``; the classes here describe what went wrong
from the point of view of indexing and retrieval.
"""

from typing import Optional


class RagReviewError(Exception):
    """Base exception for rag-review."""
    pass


class ParseFailure(RagReviewError):
    """Source text could not be parsed by the grammar-aware extractor."""

    def __init__(self, file_path: str, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.file_path = file_path
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"Parse error in {file_path} at {self.location}: {message}")

    @property
    def location(self) -> str:
        if self.line is None:
            return "unknown location"
        if self.column is None:
            return f"line {self.line}"
        return f"line {self.line}, column {self.column}"


class UnsupportedLanguage(RagReviewError):
    """File extension is not in the language table. Expected for non-source files."""

    def __init__(self, file_path: str, extension: str) -> None:
        self.file_path = file_path
        self.extension = extension
        super().__init__(f"Unsupported extension {extension or '(none)'!r} for {file_path}")


class EmbeddingError(RagReviewError):
    """Embeddings could not be produced for a batch."""
    pass


class StoreError(RagReviewError):
    """Vector store rejected a request."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message)


class CollectionNotFound(StoreError):
    """Collection for the repository does not exist."""

    def __init__(self, repo_name: str) -> None:
        self.repo_name = repo_name
        super().__init__(f"Collection for repository '{repo_name}' not found", status=404)


class RepositoryNotFound(RagReviewError):
    """Repository path to index does not exist or is not a directory."""
    pass


class RepositoryNotIndexed(RagReviewError):
    """Review requested for a repository that has no collection."""

    def __init__(self, repo_name: str) -> None:
        self.repo_name = repo_name
        super().__init__(f"Repository '{repo_name}' not indexed")

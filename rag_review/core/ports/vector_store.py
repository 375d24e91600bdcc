"""
Vector store interface.

All store implementations (chroma, memory) must implement this interface.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from rag_review.core.models import Chunk, CollectionHandle, CollectionInfo, RetrievedResult

COLLECTION_PREFIX = "rag_review_"
MAX_NAME_LENGTH = 50


def collection_name_for(repo_name: str) -> str:
    """Namespaced, store-safe collection name for a repository."""
    safe_name = re.sub(r"[^a-z0-9_-]", "_", repo_name.lower())[:MAX_NAME_LENGTH]
    return f"{COLLECTION_PREFIX}{safe_name}"


def repo_name_for(collection_name: str) -> Optional[str]:
    """Inverse of ``collection_name_for``; None for foreign collections."""
    if not collection_name.startswith(COLLECTION_PREFIX):
        return None
    return collection_name[len(COLLECTION_PREFIX):]


class VectorStore(ABC):
    """
    Abstract base class for vector store implementations.
    """

    # === Collections ===

    @abstractmethod
    async def get_or_create_collection(self, repo_name: str) -> CollectionHandle:
        """Get the repository's collection, creating it when missing."""
        pass

    @abstractmethod
    async def get_collection(self, repo_name: str) -> CollectionHandle:
        """Get an existing collection. Raises CollectionNotFound."""
        pass

    @abstractmethod
    async def list_collections(self) -> List[CollectionInfo]:
        """List this tool's collections, prefix stripped."""
        pass

    @abstractmethod
    async def delete_collection(self, repo_name: str) -> None:
        """Delete a collection. Raises CollectionNotFound."""
        pass

    # === Records ===

    @abstractmethod
    async def upsert(self, collection: CollectionHandle, chunks: List[Chunk]) -> None:
        """Store embedded chunks (id, embedding, text, metadata)."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: CollectionHandle,
        embedding: List[float],
        top_k: int = 10,
        where: Optional[Dict[str, Any]] = None,
    ) -> List[RetrievedResult]:
        """Vector similarity search, nearest first."""
        pass

    # === Lifecycle ===

    @abstractmethod
    async def health_check(self) -> str:
        """Return the backend version; raises when unreachable."""
        pass

    async def close(self) -> None:
        """Release client resources."""
        pass

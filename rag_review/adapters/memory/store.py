"""
Memory vector store adapter.

In-process store with brute-force cosine search. Fast and simple for
development and tests.
"""

import asyncio
import math
import uuid
from typing import Any, Dict, List, Optional, Tuple

from rag_review.core.errors import CollectionNotFound, StoreError
from rag_review.core.models import Chunk, CollectionHandle, CollectionInfo, RetrievedResult
from rag_review.core.ports.vector_store import VectorStore, collection_name_for, repo_name_for

# (embedding, document, metadata)
_Record = Tuple[List[float], str, Dict[str, Any]]


def cosine_distance(a: List[float], b: List[float]) -> float:
    """1 - cosine similarity; 1.0 when either vector is all zeros."""
    if len(a) != len(b):
        raise StoreError(f"Embedding dimension mismatch: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norm == 0:
        return 1.0
    return 1.0 - dot / norm


def _matches(metadata: Dict[str, Any], where: Optional[Dict[str, Any]]) -> bool:
    if not where:
        return True
    return all(metadata.get(key) == value for key, value in where.items())


class MemoryVectorStore(VectorStore):
    """
    In-process in-memory vector store implementation.
    """

    def __init__(self) -> None:
        self._ids: Dict[str, str] = {}
        self._records: Dict[str, Dict[str, _Record]] = {}
        self._lock = asyncio.Lock()

    # === Collections ===

    async def get_or_create_collection(self, repo_name: str) -> CollectionHandle:
        name = collection_name_for(repo_name)
        async with self._lock:
            if name not in self._ids:
                self._ids[name] = str(uuid.uuid4())
                self._records[name] = {}
            return CollectionHandle(id=self._ids[name], name=name, repo_name=repo_name)

    async def get_collection(self, repo_name: str) -> CollectionHandle:
        name = collection_name_for(repo_name)
        async with self._lock:
            if name not in self._ids:
                raise CollectionNotFound(repo_name)
            return CollectionHandle(id=self._ids[name], name=name, repo_name=repo_name)

    async def list_collections(self) -> List[CollectionInfo]:
        async with self._lock:
            return [
                CollectionInfo(name=repo_name_for(name), id=collection_id)
                for name, collection_id in self._ids.items()
            ]

    async def delete_collection(self, repo_name: str) -> None:
        name = collection_name_for(repo_name)
        async with self._lock:
            if name not in self._ids:
                raise CollectionNotFound(repo_name)
            del self._ids[name]
            del self._records[name]

    # === Records ===

    def _records_for(self, collection: CollectionHandle) -> Dict[str, _Record]:
        if collection.name not in self._records:
            raise CollectionNotFound(collection.repo_name)
        return self._records[collection.name]

    async def upsert(self, collection: CollectionHandle, chunks: List[Chunk]) -> None:
        async with self._lock:
            records = self._records_for(collection)
            for chunk in chunks:
                if not chunk.has_embedding:
                    raise StoreError(f"Chunk {chunk.id} has no embedding")
                records[chunk.id] = (list(chunk.embedding), chunk.text, chunk.to_metadata())

    async def query(
        self,
        collection: CollectionHandle,
        embedding: List[float],
        top_k: int = 10,
        where: Optional[Dict[str, Any]] = None,
    ) -> List[RetrievedResult]:
        async with self._lock:
            records = list(self._records_for(collection).items())

        results = [
            RetrievedResult(
                id=chunk_id,
                document=document,
                metadata=dict(metadata),
                distance=cosine_distance(embedding, vector),
            )
            for chunk_id, (vector, document, metadata) in records
            if _matches(metadata, where)
        ]
        results.sort(key=lambda result: result.distance)
        return results[:top_k]

    async def count(self, collection: CollectionHandle) -> int:
        async with self._lock:
            return len(self._records_for(collection))

    # === Lifecycle ===

    async def health_check(self) -> str:
        return "memory"

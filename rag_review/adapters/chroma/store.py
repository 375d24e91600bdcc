"""
Chroma vector store adapter.

Talks to the Chroma v2 REST API directly over httpx.
"""

from typing import Any, Dict, List, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from infra.config import Chroma, Timeouts
from infra.exceptions import ApiError, ServiceUnavailableError
from infra.httpx_handler import map_httpx_error_to_exception, raise_for_status
from infra.logger import get_logger
from rag_review.core.errors import CollectionNotFound, StoreError
from rag_review.core.models import Chunk, CollectionHandle, CollectionInfo, RetrievedResult
from rag_review.core.ports.vector_store import VectorStore, collection_name_for, repo_name_for

log = get_logger("rag_review.store.chroma")

SERVICE = "ChromaDB"
CHROMA_HINT = "Run: docker run -p 8000:8000 chromadb/chroma"

QUERY_INCLUDE = ["documents", "metadatas", "distances"]


def to_where_clause(where: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Chroma accepts a single field per clause; several fields need $and."""
    if not where:
        return None
    if len(where) == 1:
        return dict(where)
    return {"$and": [{key: value} for key, value in where.items()]}


def parse_query_result(result: Dict[str, Any]) -> List[RetrievedResult]:
    """Flatten Chroma's per-query nested lists for a single query embedding."""
    try:
        ids = result["ids"][0]
        documents = result["documents"][0]
        metadatas = result["metadatas"][0]
        distances = result["distances"][0]
    except (KeyError, IndexError, TypeError):
        return []

    return [
        RetrievedResult(
            id=chunk_id,
            document=document or "",
            metadata=metadata or {},
            distance=float(distance) if distance is not None else 0.0,
        )
        for chunk_id, document, metadata, distance in zip(ids, documents, metadatas, distances)
    ]


class ChromaVectorStore(VectorStore):
    """
    Vector store backed by a Chroma server.

    Collections are addressed by name for lookup and deletion, and by id
    for record operations.
    """

    def __init__(
            self,
            host: str,
            tenant: str = "default_tenant",
            database: str = "default_database",
            timeout: float = Timeouts.STANDARD,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.host = host.rstrip("/")
        self.tenant = tenant
        self.database = database
        self._client = httpx.AsyncClient(base_url=self.host, timeout=timeout, transport=transport)

    def _path(self, template: str, **params: str) -> str:
        return template.format(tenant=self.tenant, database=self.database, **params)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(ServiceUnavailableError),
        reraise=True
    )
    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.error("chroma.request.failed", method=method, path=path, error=str(e))
            raise map_httpx_error_to_exception(e, SERVICE, CHROMA_HINT) from e

        if response.status_code in (429, 500, 502, 503, 504):
            log.warning("chroma.request.unavailable", method=method, path=path, status=response.status_code)
        raise_for_status(response, SERVICE)
        return response

    async def _call(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._request(method, path, **kwargs)
        except ApiError as e:
            raise StoreError(f"{SERVICE} {method} {path}: HTTP {e.status} - {e.body!r}", status=e.status) from e

    async def _call_json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._call(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"{SERVICE} {method} {path}: invalid JSON body {response.text[:200]!r}") from e

    # === Collections ===

    async def get_collection(self, repo_name: str) -> CollectionHandle:
        name = collection_name_for(repo_name)
        try:
            body = await self._call_json("GET", self._path(Chroma.COLLECTION, collection=name))
        except StoreError as e:
            if e.status == 404:
                raise CollectionNotFound(repo_name) from e
            raise

        return CollectionHandle(id=body["id"], name=body.get("name", name), repo_name=repo_name)

    async def get_or_create_collection(self, repo_name: str) -> CollectionHandle:
        try:
            return await self.get_collection(repo_name)
        except CollectionNotFound:
            pass

        name = collection_name_for(repo_name)
        body = await self._call_json(
            "POST",
            self._path(Chroma.COLLECTIONS),
            json={
                "name": name,
                "metadata": {"hnsw:space": "cosine"},
                "get_or_create": True,
            },
        )
        log.info("chroma.collection.created", name=name, id=body["id"])
        return CollectionHandle(id=body["id"], name=name, repo_name=repo_name)

    async def list_collections(self) -> List[CollectionInfo]:
        body = await self._call_json("GET", self._path(Chroma.COLLECTIONS))
        collections = []
        for collection in body:
            repo_name = repo_name_for(collection.get("name", ""))
            if repo_name is not None:
                collections.append(CollectionInfo(name=repo_name, id=collection["id"]))
        return collections

    async def delete_collection(self, repo_name: str) -> None:
        name = collection_name_for(repo_name)
        try:
            await self._call("DELETE", self._path(Chroma.COLLECTION, collection=name))
        except StoreError as e:
            if e.status == 404:
                raise CollectionNotFound(repo_name) from e
            raise
        log.info("chroma.collection.deleted", name=name)

    # === Records ===

    async def upsert(self, collection: CollectionHandle, chunks: List[Chunk]) -> None:
        if not chunks:
            return
        missing = [chunk.id for chunk in chunks if not chunk.has_embedding]
        if missing:
            raise StoreError(f"Chunks without embeddings: {missing}")

        await self._call(
            "POST",
            self._path(Chroma.UPSERT, collection=collection.id),
            json={
                "ids": [chunk.id for chunk in chunks],
                "embeddings": [chunk.embedding for chunk in chunks],
                "documents": [chunk.text for chunk in chunks],
                "metadatas": [chunk.to_metadata() for chunk in chunks],
            },
            timeout=Timeouts.UPSERT,
        )
        log.debug("chroma.upsert.complete", collection=collection.name, chunks=len(chunks))

    async def query(
            self,
            collection: CollectionHandle,
            embedding: List[float],
            top_k: int = 10,
            where: Optional[Dict[str, Any]] = None,
    ) -> List[RetrievedResult]:
        body: Dict[str, Any] = {
            "query_embeddings": [embedding],
            "n_results": top_k,
            "include": QUERY_INCLUDE,
        }
        where_clause = to_where_clause(where)
        if where_clause:
            body["where"] = where_clause

        result = await self._call_json("POST", self._path(Chroma.QUERY, collection=collection.id), json=body)
        return parse_query_result(result)

    # === Lifecycle ===

    async def health_check(self) -> str:
        return str(await self._call_json("GET", Chroma.VERSION))

    async def close(self) -> None:
        await self._client.aclose()

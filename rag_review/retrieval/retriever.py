import asyncio
from typing import List, Optional

from infra.logger import get_logger
from rag_review.core.errors import EmbeddingError, StoreError
from rag_review.core.models import CollectionHandle, RetrievalResult, RetrievedResult
from rag_review.core.ports import Embedder, VectorStore
from rag_review.retrieval import context_assembler, diff_analyzer
from rag_review.retrieval.context_assembler import DEFAULT_MAX_CHARS

log = get_logger("rag_review.retrieval.retriever")

NO_QUERIES = "_No context queries generated from diff._"


class Retriever:
    """
    Diff -> queries -> embeddings -> vector searches -> assembled context.

    Searches are independent: a failed search degrades to zero results for
    that query. Embedding failure fails the whole retrieval.
    """

    def __init__(
            self,
            store: VectorStore,
            embedder: Embedder,
            n_results: int = 10,
            max_concurrency: int = 4,
            max_chars: int = DEFAULT_MAX_CHARS,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.n_results = n_results
        self.max_concurrency = max_concurrency
        self.max_chars = max_chars

    async def retrieve_for_diff(self, diff_text: str, collection: CollectionHandle) -> RetrievalResult:
        analysis = diff_analyzer.parse(diff_text)
        queries = diff_analyzer.generate_queries(analysis)
        log.info(
            "retrieve.diff.analyzed",
            collection=collection.name,
            files=len(analysis.files),
            hunks=len(analysis.hunks),
            queries=len(queries),
        )

        if not queries:
            return RetrievalResult(
                context=context_assembler.empty_context(NO_QUERIES),
                analysis=analysis,
                queries=[],
            )

        results = await self._search_all(queries, collection)
        context = context_assembler.assemble(results, max_chars=self.max_chars)
        log.info("retrieve.diff.complete", chunks=len(context.chunks_used), chars=context.total_chars)

        return RetrievalResult(context=context, analysis=analysis, queries=queries)

    async def retrieve_for_query(
            self,
            query: str,
            collection: CollectionHandle,
            n_results: Optional[int] = None,
    ) -> RetrievalResult:
        """Free-text search through the same embed, search, assemble path."""
        results = await self._search_all([query], collection, n_results)
        context = context_assembler.assemble(results, max_chars=self.max_chars)
        return RetrievalResult(context=context, queries=[query])

    async def _embed(self, queries: List[str]) -> List[List[float]]:
        try:
            embeddings = await self.embedder.embed(queries)
        except (EmbeddingError, ConnectionError) as e:
            log.error("retrieve.embed.failed", queries=len(queries), error=str(e))
            raise EmbeddingError(f"Failed to embed {len(queries)} queries: {e}") from e

        if len(embeddings) != len(queries):
            raise EmbeddingError(f"Expected {len(queries)} embeddings, got {len(embeddings)}")
        return embeddings

    async def _search_all(
            self,
            queries: List[str],
            collection: CollectionHandle,
            n_results: Optional[int] = None,
    ) -> List[RetrievedResult]:
        embeddings = await self._embed(queries)
        top_k = n_results or self.n_results
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def search(index: int, embedding: List[float]) -> List[RetrievedResult]:
            async with semaphore:
                try:
                    return await self.store.query(collection, embedding, top_k=top_k)
                except (StoreError, ConnectionError, asyncio.TimeoutError) as e:
                    log.warning("retrieve.query.failed", query=queries[index], error=str(e))
                    return []

        per_query = await asyncio.gather(
            *(search(index, embedding) for index, embedding in enumerate(embeddings))
        )

        # gather preserves argument order, so merging follows query order
        merged: List[RetrievedResult] = []
        for results in per_query:
            merged.extend(results)
        return context_assembler.deduplicate(merged)

"""
Indexing pipeline.

1. Walk repository files
2. Extract chunks from each file
3. Embed chunks in fixed-size batches
4. Upsert each embedded batch into the vector store

A failed batch stops the run; batches stored before it stay stored.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from infra.logger import get_logger
from rag_review.core.errors import (
    CollectionNotFound,
    EmbeddingError,
    ParseFailure,
    RepositoryNotFound,
    StoreError,
    UnsupportedLanguage,
)
from rag_review.core.models import Chunk, CollectionHandle
from rag_review.core.ports import Embedder, VectorStore
from rag_review.indexing.file_walker import FileWalker, SourceFile, read_text
from rag_review.parsing import extract_chunks

log = get_logger("rag_review.indexing.pipeline")

DEFAULT_BATCH_SIZE = 10


class IndexPhase(str, Enum):
    SCANNING = "scanning"
    PARSING = "parsing"
    EMBEDDING = "embedding"


@dataclass
class IndexProgress:
    phase: IndexPhase
    current: int = 0
    total: int = 0
    file: Optional[str] = None


@dataclass
class IndexStats:
    repo_name: str
    files: int = 0
    files_errored: int = 0
    chunks: int = 0


ProgressCallback = Callable[[IndexProgress], None]


def repo_name_from_path(repo_path: str | Path) -> str:
    return Path(repo_path).expanduser().resolve().name


class IndexingPipeline:
    """
    Orchestrates indexing of one repository into its collection.
    """

    def __init__(
            self,
            store: VectorStore,
            embedder: Embedder,
            batch_size: int = DEFAULT_BATCH_SIZE,
            progress: Optional[ProgressCallback] = None,
            extra_ignores: Iterable[str] = (),
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.store = store
        self.embedder = embedder
        self.batch_size = batch_size
        self.progress = progress
        self.extra_ignores = list(extra_ignores)

    def _report(self, event: IndexProgress) -> None:
        if self.progress is not None:
            self.progress(event)

    async def run(self, repo_path: str | Path, name: Optional[str] = None) -> IndexStats:
        root = Path(repo_path).expanduser().resolve()
        repo_name = name or root.name

        if not root.exists():
            raise RepositoryNotFound(f"Repository path does not exist: {root}")
        if not root.is_dir():
            raise RepositoryNotFound(f"Repository path is not a directory: {root}")

        log.info("index.start", repo=repo_name, path=str(root))
        collection = await self.store.get_or_create_collection(repo_name)

        files = FileWalker(root, self.extra_ignores).walk()
        self._report(IndexProgress(IndexPhase.SCANNING, total=len(files)))

        chunks, processed, errored = await self._extract(files)
        log.info("index.extracted", repo=repo_name, files=processed, errored=errored, chunks=len(chunks))

        await self._embed_and_store(collection, chunks)

        stats = IndexStats(repo_name=repo_name, files=processed, files_errored=errored, chunks=len(chunks))
        log.info("index.complete", repo=repo_name, files=stats.files, chunks=stats.chunks)
        return stats

    async def reindex(self, repo_path: str | Path, name: Optional[str] = None) -> IndexStats:
        """Delete the repository's collection, then index from scratch."""
        repo_name = name or repo_name_from_path(repo_path)
        try:
            await self.store.delete_collection(repo_name)
            log.info("index.collection.deleted", repo=repo_name)
        except CollectionNotFound:
            pass
        return await self.run(repo_path, repo_name)

    async def _extract(self, files: List[SourceFile]) -> Tuple[List[Chunk], int, int]:
        chunks: List[Chunk] = []
        processed = errored = 0

        for index, source_file in enumerate(files, start=1):
            self._report(IndexProgress(IndexPhase.PARSING, current=index, total=len(files), file=source_file.relative_path))

            content, error = await read_text(source_file.path)
            if content is None:
                log.warning("index.file.read_failed", file=source_file.relative_path, error=error)
                errored += 1
                continue

            try:
                file_chunks = extract_chunks(content, source_file.relative_path)
            except UnsupportedLanguage:
                log.debug("index.file.unsupported", file=source_file.relative_path)
                continue
            except ParseFailure as e:
                log.warning("index.file.parse_failed", file=source_file.relative_path, location=e.location, error=e.message)
                errored += 1
                continue

            chunks.extend(file_chunks)
            processed += 1

        return chunks, processed, errored

    async def _embed_and_store(self, collection: CollectionHandle, chunks: List[Chunk]) -> None:
        total_batches = -(-len(chunks) // self.batch_size)

        for batch_num, start in enumerate(range(0, len(chunks), self.batch_size), start=1):
            batch = chunks[start:start + self.batch_size]
            self._report(IndexProgress(IndexPhase.EMBEDDING, current=batch_num, total=total_batches))

            try:
                embeddings = await self.embedder.embed([chunk.text for chunk in batch])
            except EmbeddingError as e:
                log.error("index.batch.embed_failed", batch=batch_num, total=total_batches, error=str(e))
                raise
            if len(embeddings) != len(batch):
                raise EmbeddingError(f"Batch {batch_num}: expected {len(batch)} embeddings, got {len(embeddings)}")

            embedded = [chunk.with_embedding(embedding) for chunk, embedding in zip(batch, embeddings)]
            try:
                await self.store.upsert(collection, embedded)
            except StoreError as e:
                log.error("index.batch.store_failed", batch=batch_num, total=total_batches, error=str(e))
                raise

            log.debug("index.batch.stored", batch=batch_num, total=total_batches, chunks=len(batch))

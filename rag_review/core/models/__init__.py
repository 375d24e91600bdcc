from .chunk import Chunk, ChunkType, Language, generate_chunk_id
from .diff import ChangedFile, DiffAnalysis, FileStatus, Hunk, ModifiedSymbol
from .retrieval import (
    AssembledContext,
    CollectionHandle,
    CollectionInfo,
    RetrievalResult,
    RetrievedResult,
)

__all__ = [
    "AssembledContext",
    "ChangedFile",
    "Chunk",
    "ChunkType",
    "CollectionHandle",
    "CollectionInfo",
    "DiffAnalysis",
    "FileStatus",
    "Hunk",
    "Language",
    "ModifiedSymbol",
    "RetrievalResult",
    "RetrievedResult",
    "generate_chunk_id",
]

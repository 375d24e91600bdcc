"""
Adapters package.

Provides implementations of the collaborator ports.
"""

from rag_review.adapters.chroma.store import ChromaVectorStore
from rag_review.adapters.memory.store import MemoryVectorStore
from rag_review.adapters.ollama.embedding import OllamaEmbedder
from rag_review.adapters.store_factory import create_vector_store

__all__ = [
    "ChromaVectorStore",
    "MemoryVectorStore",
    "OllamaEmbedder",
    "create_vector_store",
]

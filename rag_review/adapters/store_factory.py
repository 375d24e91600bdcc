"""
Vector store factory.

Supports chroma and memory backends.
"""

from infra.logger import get_logger
from rag_review.adapters.chroma.store import ChromaVectorStore
from rag_review.adapters.memory.store import MemoryVectorStore
from rag_review.config.store import StoreConfig
from rag_review.core.ports import VectorStore

log = get_logger("rag_review.store.factory")


def create_vector_store(config: StoreConfig) -> VectorStore:
    """
    Create a vector store instance based on configuration.
    """
    store_type = (config.STORE_TYPE or "chroma").lower()
    log.info("store.factory.config", store_type=store_type, host=config.CHROMA_HOST)

    match store_type:
        case "chroma" | "chromadb":
            return ChromaVectorStore(
                host=config.CHROMA_HOST,
                tenant=config.CHROMA_TENANT,
                database=config.CHROMA_DATABASE,
            )
        case "mem" | "memory" | "in-memory":
            return MemoryVectorStore()
        case _:
            raise ValueError(
                f"Unsupported store type: {config.STORE_TYPE!r}. "
                f"Supported values: 'chroma', 'chromadb', 'mem', 'memory', 'in-memory'"
            )

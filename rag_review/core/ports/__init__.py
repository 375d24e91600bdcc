from .chat import ChatModel
from .embedder import Embedder
from .vector_store import COLLECTION_PREFIX, VectorStore, collection_name_for, repo_name_for

__all__ = [
    "COLLECTION_PREFIX",
    "ChatModel",
    "Embedder",
    "VectorStore",
    "collection_name_for",
    "repo_name_for",
]

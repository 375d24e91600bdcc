"""Embedding provider port."""

from typing import List, Protocol


class Embedder(Protocol):
    """Port for generating text embeddings."""

    async def embed(self, texts: List[str]) -> List[List[float]]: ...

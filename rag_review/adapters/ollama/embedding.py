"""
Ollama embedding adapter.

Manages communication with Ollama's /api/embed endpoint.
"""

from typing import Any, Dict, List, Optional

import httpx

from infra.config import Ollama, Timeouts
from infra.exceptions import ApiError, ServiceUnavailableError
from infra.httpx_handler import map_httpx_error_to_exception, raise_for_status
from infra.llm import OLLAMA_HINT
from infra.logger import get_logger
from rag_review.core.errors import EmbeddingError

log = get_logger("rag_review.embedding.ollama")

SERVICE = "Ollama"

# Longer inputs overflow the context of common embedding models
MAX_EMBED_CHARS = 8000


class OllamaEmbedder:
    """
    Embeds texts with an Ollama embedding model.

    A whole batch goes out in one request; when Ollama rejects the batch
    or answers with the wrong number of vectors, texts are embedded one
    at a time instead.
    """

    def __init__(
            self,
            host: str,
            model: str,
            timeout: float = Timeouts.EMBEDDING,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.host = host.rstrip("/")
        self.model = model
        self._client = httpx.AsyncClient(base_url=self.host, timeout=timeout, transport=transport)

    async def _post_embed(self, payload: Dict[str, Any]) -> List[List[float]]:
        try:
            response = await self._client.post(Ollama.EMBED, json=payload)
        except httpx.HTTPError as e:
            log.error("embedding.request.failed", host=self.host, error=str(e))
            raise map_httpx_error_to_exception(e, SERVICE, OLLAMA_HINT) from e

        raise_for_status(response, SERVICE)

        try:
            body = response.json()
        except ValueError as e:
            raise EmbeddingError(f"Invalid JSON from Ollama for model {self.model}: {e}") from e

        embeddings = body.get("embeddings") if isinstance(body, dict) else None
        if not isinstance(embeddings, list):
            raise EmbeddingError(f"No embeddings in Ollama response for model {self.model}")
        return embeddings

    async def embed(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []

        inputs = [text[:MAX_EMBED_CHARS] for text in texts]
        log.debug("embedding.batch.start", model=self.model, texts=len(inputs))

        try:
            embeddings = await self._post_embed({"model": self.model, "input": inputs})
        except (ApiError, ServiceUnavailableError, EmbeddingError) as e:
            log.warning("embedding.batch.failed", model=self.model, texts=len(inputs), error=str(e))
        else:
            if len(embeddings) == len(inputs):
                return embeddings
            log.warning("embedding.batch.count_mismatch", expected=len(inputs), received=len(embeddings))

        return [await self.embed_one(text) for text in inputs]

    async def embed_one(self, text: str) -> List[float]:
        try:
            embeddings = await self._post_embed({"model": self.model, "input": text[:MAX_EMBED_CHARS]})
        except (ApiError, ServiceUnavailableError) as e:
            raise EmbeddingError(f"Ollama embedding failed for model {self.model}: {e}") from e

        if not embeddings:
            raise EmbeddingError(f"Ollama returned no embedding for model {self.model}")
        return embeddings[0]

    async def list_models(self) -> List[str]:
        """Names of the models installed in Ollama."""
        try:
            response = await self._client.get(Ollama.TAGS, timeout=Timeouts.STANDARD)
        except httpx.HTTPError as e:
            raise map_httpx_error_to_exception(e, SERVICE, OLLAMA_HINT) from e

        raise_for_status(response, SERVICE)
        return [model.get("name", "") for model in response.json().get("models", [])]

    async def health_check(self) -> bool:
        """True when Ollama answers and the embedding model is installed."""
        models = await self.list_models()
        return any(self.model in name for name in models)

    async def close(self) -> None:
        await self._client.aclose()

"""Config constants for services."""

from .endpoints import Chroma, Ollama
from .timeouts import Timeouts

__all__ = ["Chroma", "Ollama", "Timeouts"]

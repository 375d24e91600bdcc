"""API endpoints."""

from .chroma import Chroma
from .ollama import Ollama

__all__ = ["Chroma", "Ollama"]

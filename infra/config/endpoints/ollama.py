"""API endpoints for the Ollama service."""

from dataclasses import dataclass


@dataclass
class Ollama:
    TAGS: str = "/api/tags"
    EMBED: str = "/api/embed"
    CHAT: str = "/api/chat"
    OPENAI_BASE: str = "/v1"

"""Per-request timeouts in seconds."""

from dataclasses import dataclass


@dataclass
class Timeouts:
    # Metadata calls: version, tags, collection lookups
    STANDARD: int = 30
    # Chroma upsert of one embedding batch
    UPSERT: int = 60
    # Ollama /api/embed; the first call also loads the model
    EMBEDDING: int = 120
    # Full review completion on a local model
    GENERATION: int = 300

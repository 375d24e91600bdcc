from dataclasses import dataclass, field
from typing import Any, Dict, List

from rag_review.core.models.diff import DiffAnalysis


@dataclass(frozen=True)
class RetrievedResult:
    """One vector-search hit. Smaller distance means more relevant."""
    id: str
    document: str
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)
    distance: float = 0.0


@dataclass
class AssembledContext:
    text: str
    chunks_used: List[RetrievedResult] = field(default_factory=list)
    total_chars: int = 0
    estimated_tokens: int = 0


@dataclass
class RetrievalResult:
    context: AssembledContext
    analysis: DiffAnalysis | None = None
    queries: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CollectionHandle:
    """Resolved store collection for one indexed repository."""
    id: str
    name: str
    repo_name: str


@dataclass(frozen=True)
class CollectionInfo:
    name: str
    id: str

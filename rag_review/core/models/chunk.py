import hashlib
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Union


class ChunkType(str, Enum):
    NAMESPACE = "namespace"
    FUNCTION = "function"
    PRIVATE_FUNCTION = "private_function"
    WINDOW = "window"


class Language(str, Enum):
    PYTHON = "python"
    ELIXIR = "elixir"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    GO = "go"
    RUBY = "ruby"
    RUST = "rust"
    JAVA = "java"
    UNKNOWN = "unknown"


def generate_chunk_id(file_path: str, chunk_type: Union[ChunkType, str], name: str, start_line: int) -> str:
    """
    Deterministic chunk ID: re-extracting unchanged code yields the same ID.
    """
    kind = chunk_type.value if isinstance(chunk_type, ChunkType) else chunk_type
    content = f"{file_path}:{kind}:{name}:{start_line}"
    return hashlib.sha256(content.encode()).hexdigest()[:16]


@dataclass(frozen=True)
class Chunk:
    """Semantic unit of source code: the retrieval unit."""
    id: str
    text: str
    chunk_type: ChunkType
    name: str
    file_path: str
    start_line: int
    end_line: int
    language: Language

    # Filled in by the embedding stage
    embedding: Optional[List[float]] = field(default=None, compare=False, repr=False)

    @classmethod
    def create(
        cls,
        text: str,
        chunk_type: ChunkType,
        name: str,
        file_path: str,
        start_line: int,
        end_line: int,
        language: Language,
    ) -> "Chunk":
        if start_line > end_line:
            raise ValueError(f"start_line {start_line} > end_line {end_line} for {file_path}:{name}")
        return cls(
            id=generate_chunk_id(file_path, chunk_type, name, start_line),
            text=text,
            chunk_type=chunk_type,
            name=name,
            file_path=file_path,
            start_line=start_line,
            end_line=end_line,
            language=language,
        )

    def with_embedding(self, embedding: List[float]) -> "Chunk":
        return replace(self, embedding=list(embedding))

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None

    def to_metadata(self) -> Dict[str, Union[str, int]]:
        """Flat metadata persisted next to the vector (str/int values only)."""
        return {
            "file_path": self.file_path,
            "chunk_type": self.chunk_type.value,
            "chunk_name": self.name,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "language": self.language.value,
        }

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from rag_review.core.models.chunk import Language


class FileStatus(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"


@dataclass
class Hunk:
    """Contiguous block of changes; ``lines`` keep their +/-/space marker."""
    old_start: int = 1
    old_count: int = 1
    new_start: int = 1
    new_count: int = 1
    context: str = ""
    lines: List[str] = field(default_factory=list)
    file_path: Optional[str] = None

    @property
    def added_lines(self) -> List[str]:
        return [line for line in self.lines if line.startswith("+")]

    @property
    def removed_lines(self) -> List[str]:
        return [line for line in self.lines if line.startswith("-")]


@dataclass
class ChangedFile:
    path: Optional[str]
    old_path: Optional[str]
    status: FileStatus
    language: Language
    hunks: List[Hunk] = field(default_factory=list)


@dataclass(frozen=True)
class ModifiedSymbol:
    file: str
    name: str


@dataclass
class DiffAnalysis:
    files: List[ChangedFile] = field(default_factory=list)
    hunks: List[Hunk] = field(default_factory=list)
    added_lines: int = 0
    removed_lines: int = 0
    modified_symbols: List[ModifiedSymbol] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"Files changed: {len(self.files)}\n"
            f"Lines added: {self.added_lines}\n"
            f"Lines removed: {self.removed_lines}\n"
            f"Hunks: {len(self.hunks)}\n"
            f"Modified symbols: {len(self.modified_symbols)}\n"
        )

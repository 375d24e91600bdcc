"""
Extension -> language table shared by chunk extraction and diff analysis.
"""

from pathlib import PurePosixPath
from typing import Dict, List

from rag_review.core.models import Language

SUPPORTED_EXTENSIONS: Dict[str, Language] = {
    ".py": Language.PYTHON,
    ".ex": Language.ELIXIR,
    ".exs": Language.ELIXIR,
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
    ".go": Language.GO,
    ".rb": Language.RUBY,
    ".rs": Language.RUST,
    ".java": Language.JAVA,
}


def extension_of(file_path: str) -> str:
    return PurePosixPath(file_path.replace("\\", "/")).suffix.lower()


def detect_language(file_path: str) -> Language:
    return SUPPORTED_EXTENSIONS.get(extension_of(file_path), Language.UNKNOWN)


def is_supported(file_path: str) -> bool:
    return extension_of(file_path) in SUPPORTED_EXTENSIONS


def supported_extensions() -> List[str]:
    return sorted(SUPPORTED_EXTENSIONS)

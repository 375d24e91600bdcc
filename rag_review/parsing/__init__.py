from .boundaries import estimate_end_line
from .chunker import extract_chunks
from .languages import SUPPORTED_EXTENSIONS, detect_language, is_supported, supported_extensions

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "detect_language",
    "estimate_end_line",
    "extract_chunks",
    "is_supported",
    "supported_extensions",
]

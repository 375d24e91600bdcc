"""
Fixed-window fallback for languages without a grammar-aware extractor.
"""

from typing import List

from rag_review.core.models import Chunk, ChunkType, Language
from rag_review.parsing.lines import split_lines

WINDOW_LINES = 100
OVERLAP_LINES = 20


class WindowExtractor:
    """Splits text into overlapping windows of ``window`` lines."""

    def __init__(self, window: int = WINDOW_LINES, overlap: int = OVERLAP_LINES) -> None:
        if window <= 0 or not 0 <= overlap < window:
            raise ValueError(f"Invalid window/overlap: {window}/{overlap}")
        self.window = window
        self.overlap = overlap

    def windows(self, total_lines: int) -> List[tuple[int, int]]:
        """0-based half-open (start, end) line ranges."""
        if total_lines <= self.window:
            return [(0, total_lines)]

        step = self.window - self.overlap
        ranges = []
        start = 0
        while True:
            end = min(start + self.window, total_lines)
            ranges.append((start, end))
            if end == total_lines:
                return ranges
            start += step

    def extract(self, source: str, file_path: str, language: Language) -> List[Chunk]:
        lines = split_lines(source)
        chunks = []

        for index, (start, end) in enumerate(self.windows(len(lines))):
            text = "\n".join(lines[start:end])
            if not text.strip():
                continue
            chunks.append(Chunk.create(
                text=text,
                chunk_type=ChunkType.WINDOW,
                name=f"chunk_{index}",
                file_path=file_path,
                start_line=start + 1,
                end_line=end,
                language=language,
            ))

        return chunks

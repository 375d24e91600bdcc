"""
Chunk extraction entry point: picks the extractor for a language.

Adding a grammar-aware language means one entry in ``GRAMMAR_EXTRACTORS``
(and the extension table); everything else goes through fixed windows.
"""

from typing import Dict, List, Optional

from rag_review.core.errors import UnsupportedLanguage
from rag_review.core.models import Chunk, Language
from rag_review.parsing.languages import detect_language, extension_of
from rag_review.parsing.python_extractor import PythonExtractor
from rag_review.parsing.window_extractor import WindowExtractor

GRAMMAR_EXTRACTORS: Dict[Language, PythonExtractor] = {
    Language.PYTHON: PythonExtractor(),
}

_window_extractor = WindowExtractor()


def extract_chunks(source: str, file_path: str, language: Optional[Language] = None) -> List[Chunk]:
    """
    Turn one file's text into ordered chunks.

    Raises UnsupportedLanguage for unknown extensions and ParseFailure when
    the grammar-aware extractor cannot parse the text.
    """
    if language is None:
        language = detect_language(file_path)
    if language is Language.UNKNOWN:
        raise UnsupportedLanguage(file_path, extension_of(file_path))

    extractor = GRAMMAR_EXTRACTORS.get(language)
    if extractor is not None:
        return extractor.extract(source, file_path)
    return _window_extractor.extract(source, file_path, language)

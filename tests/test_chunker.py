import pytest
from conftest import SAMPLE_PYTHON

from rag_review.core.errors import ParseFailure, UnsupportedLanguage
from rag_review.core.models import ChunkType, Language
from rag_review.parsing import detect_language, extract_chunks, is_supported, supported_extensions


class TestLanguageTable:

    @pytest.mark.parametrize("path, language", [
        ("app/models.py", Language.PYTHON),
        ("lib/app.ex", Language.ELIXIR),
        ("test/app_test.exs", Language.ELIXIR),
        ("src/index.TS", Language.TYPESCRIPT),
        ("src/view.jsx", Language.JAVASCRIPT),
        ("cmd/main.go", Language.GO),
        ("README.md", Language.UNKNOWN),
        ("Makefile", Language.UNKNOWN),
    ])
    def test_detect_language(self, path, language):
        assert detect_language(path) is language

    def test_supported_extensions(self):
        assert ".py" in supported_extensions()
        assert is_supported("a/b.rs")
        assert not is_supported("a/b.txt")


class TestExtractChunks:

    def test_python_uses_grammar(self):
        chunks = extract_chunks(SAMPLE_PYTHON, "billing/invoice.py")
        assert {c.chunk_type for c in chunks} == {ChunkType.NAMESPACE, ChunkType.FUNCTION, ChunkType.PRIVATE_FUNCTION}

    def test_other_languages_use_windows(self):
        [chunk] = extract_chunks("function render() {\n  return 1;\n}\n", "web/app.js")
        assert chunk.chunk_type is ChunkType.WINDOW
        assert chunk.language is Language.JAVASCRIPT

    def test_explicit_language_wins(self):
        [chunk] = extract_chunks("def run():\n    return 1\n", "scripts/run", Language.RUBY)
        assert chunk.chunk_type is ChunkType.WINDOW

    def test_unsupported_extension(self):
        with pytest.raises(UnsupportedLanguage) as excinfo:
            extract_chunks("# notes", "docs/notes.md")
        assert excinfo.value.extension == ".md"

    def test_parse_failure_propagates(self):
        with pytest.raises(ParseFailure):
            extract_chunks("class :\n", "broken.py")

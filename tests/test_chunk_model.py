import pytest

from rag_review.core.models import Chunk, ChunkType, Language, generate_chunk_id


class TestChunkId:

    def test_same_inputs_same_id(self):
        """Re-extracting unchanged code reproduces the id"""
        first = generate_chunk_id("lib/app.py", ChunkType.FUNCTION, "run/0", 12)
        second = generate_chunk_id("lib/app.py", ChunkType.FUNCTION, "run/0", 12)
        assert first == second
        assert len(first) == 16

    def test_enum_and_string_type_agree(self):
        assert generate_chunk_id("a.py", ChunkType.WINDOW, "chunk_0", 1) == generate_chunk_id("a.py", "window", "chunk_0", 1)

    @pytest.mark.parametrize("changed", [
        ("lib/other.py", ChunkType.FUNCTION, "run/0", 12),
        ("lib/app.py", ChunkType.PRIVATE_FUNCTION, "run/0", 12),
        ("lib/app.py", ChunkType.FUNCTION, "run/1", 12),
        ("lib/app.py", ChunkType.FUNCTION, "run/0", 13),
    ])
    def test_any_identity_field_changes_id(self, changed):
        assert generate_chunk_id(*changed) != generate_chunk_id("lib/app.py", ChunkType.FUNCTION, "run/0", 12)


class TestChunk:

    def make(self, **overrides) -> Chunk:
        fields = dict(
            text="def run():\n    return 1",
            chunk_type=ChunkType.FUNCTION,
            name="run/0",
            file_path="lib/app.py",
            start_line=3,
            end_line=4,
            language=Language.PYTHON,
        )
        fields.update(overrides)
        return Chunk.create(**fields)

    def test_create_derives_id(self):
        chunk = self.make()
        assert chunk.id == generate_chunk_id("lib/app.py", ChunkType.FUNCTION, "run/0", 3)
        assert not chunk.has_embedding

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            self.make(start_line=5, end_line=4)

    def test_with_embedding_keeps_identity(self):
        chunk = self.make()
        embedded = chunk.with_embedding([0.1, 0.2])
        assert embedded.embedding == [0.1, 0.2]
        assert embedded.id == chunk.id
        assert embedded == chunk
        assert chunk.embedding is None

    def test_metadata_is_flat(self):
        """Stored metadata holds only str/int values"""
        metadata = self.make().to_metadata()
        assert metadata == {
            "file_path": "lib/app.py",
            "chunk_type": "function",
            "chunk_name": "run/0",
            "start_line": 3,
            "end_line": 4,
            "language": "python",
        }
        assert all(isinstance(value, (str, int)) for value in metadata.values())

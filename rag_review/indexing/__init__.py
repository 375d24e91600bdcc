from .file_walker import DEFAULT_IGNORE_DIRS, DEFAULT_IGNORE_FILES, FileWalker, SourceFile, read_text
from .pipeline import IndexingPipeline, IndexPhase, IndexProgress, IndexStats, repo_name_from_path

__all__ = [
    "DEFAULT_IGNORE_DIRS",
    "DEFAULT_IGNORE_FILES",
    "FileWalker",
    "IndexPhase",
    "IndexProgress",
    "IndexStats",
    "IndexingPipeline",
    "SourceFile",
    "read_text",
    "repo_name_from_path",
]

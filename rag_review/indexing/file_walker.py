"""
Repository traversal for indexing.

Walks the tree in sorted order, honouring built-in ignore rules and
every .gitignore found on the way, and keeps files with a supported
extension only.
"""

import fnmatch
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import aiofiles
from gitignore_parser import parse_gitignore

from infra.logger import get_logger
from rag_review.parsing.languages import is_supported

log = get_logger("rag_review.indexing.file_walker")

# Directory names skipped at any depth
DEFAULT_IGNORE_DIRS = {
    ".git",
    "_build",
    "deps",
    "node_modules",
    ".elixir_ls",
    "cover",
    "doc",
    ".cache",
    "vendor",
    "dist",
    "build",
    "__pycache__",
}

# File name globs skipped at any depth
DEFAULT_IGNORE_FILES = (
    "*.pyc",
    "*.beam",
    "*.ez",
    "*.min.js",
    "*.bundle.js",
)

# latin-1 decodes any byte sequence, so the chain always ends in a result
ENCODINGS = ("utf-8-sig", "latin-1")


@dataclass(frozen=True)
class SourceFile:
    """A file selected for indexing."""
    path: Path
    relative_path: str


async def read_text(path: Path) -> Tuple[Optional[str], Optional[str]]:
    """
    Read a source file, trying each encoding in turn.

    Returns (content, error); exactly one of them is None.
    """
    for encoding in ENCODINGS:
        try:
            async with aiofiles.open(path, "r", encoding=encoding, errors="strict") as f:
                return await f.read(), None
        except UnicodeDecodeError:
            continue
        except FileNotFoundError:
            return None, f"File not found: {path}"
        except PermissionError:
            return None, f"Permission denied: {path}"
        except OSError as e:
            return None, f"Failed to read {path}: {e}"
    return None, f"Could not decode {path}"


class FileWalker:
    """
    Collects indexable files under a repository root.

    ``extra_ignores`` follow the built-in rules: entries ending in "/" are
    directory names, anything else is a file name glob.
    """

    def __init__(self, repo_path: str | Path, extra_ignores: Iterable[str] = ()) -> None:
        self.repo_path = Path(repo_path).resolve()
        extra = list(extra_ignores)
        self.ignore_dirs = DEFAULT_IGNORE_DIRS | {p.rstrip("/") for p in extra if p.endswith("/")}
        self.ignore_files = [*DEFAULT_IGNORE_FILES, *(p for p in extra if not p.endswith("/"))]
        # {directory: matcher of its .gitignore}
        self.gitignore_matchers: Dict[Path, Callable[[str], bool]] = {}

    def load_gitignore(self, dir_path: Path) -> None:
        gitignore_path = dir_path / ".gitignore"
        if not gitignore_path.is_file():
            return
        try:
            self.gitignore_matchers[dir_path] = parse_gitignore(str(gitignore_path), base_dir=str(dir_path))
        except OSError as e:
            log.warning("walk.gitignore.load_failed", path=str(gitignore_path), error=str(e))
            return
        log.debug("walk.gitignore.loaded", path=str(gitignore_path.relative_to(self.repo_path)))

    def is_gitignored(self, path: Path) -> bool:
        """
        True when any .gitignore from the root down to the path's directory
        excludes it.
        """
        for gitignore_dir, matcher in self.gitignore_matchers.items():
            if path.is_relative_to(gitignore_dir) and matcher(str(path)):
                return True
        return False

    def should_skip_dir(self, path: Path) -> bool:
        return path.name in self.ignore_dirs or self.is_gitignored(path)

    def should_skip_file(self, path: Path) -> bool:
        if any(fnmatch.fnmatch(path.name, pattern) for pattern in self.ignore_files):
            return True
        return self.is_gitignored(path)

    def walk(self) -> List[SourceFile]:
        files: List[SourceFile] = []

        for root, dirs, filenames in os.walk(self.repo_path):
            root_path = Path(root)
            self.load_gitignore(root_path)

            dirs[:] = sorted(d for d in dirs if not self.should_skip_dir(root_path / d))

            for filename in sorted(filenames):
                file_path = root_path / filename
                if not file_path.is_file() or not is_supported(filename):
                    continue
                if self.should_skip_file(file_path):
                    log.debug("walk.file.ignored", file=str(file_path))
                    continue
                files.append(SourceFile(path=file_path, relative_path=file_path.relative_to(self.repo_path).as_posix()))

        log.info("walk.complete", repo=str(self.repo_path), files=len(files))
        return files

    def count(self) -> int:
        return len(self.walk())

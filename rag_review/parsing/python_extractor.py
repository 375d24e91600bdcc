"""
Grammar-aware chunk extraction for Python sources.

Uses the ``ast`` module and its position metadata to cut the file at
class and function boundaries.
"""

import ast
from dataclasses import dataclass
from typing import List, Optional, Union

from rag_review.core.errors import ParseFailure
from rag_review.core.models import Chunk, ChunkType, Language
from rag_review.parsing.boundaries import estimate_end_line
from rag_review.parsing.lines import split_lines

# Shorter chunks are noise (a bare signature, a stub)
MIN_CHUNK_CHARS = 10

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


@dataclass
class Definition:
    chunk_type: ChunkType
    name: str
    start_line: int
    def_line: int
    end_line: Optional[int]


def is_private(name: str) -> bool:
    return name.startswith("_") and not (name.startswith("__") and name.endswith("__"))


def arity(args: ast.arguments) -> int:
    """Declared parameters, variadic ``*args`` / ``**kwargs`` excluded."""
    return len(args.posonlyargs) + len(args.args) + len(args.kwonlyargs)


class _DefinitionCollector(ast.NodeVisitor):
    """Collects class and function definitions depth-first, in source order."""

    def __init__(self) -> None:
        self.definitions: List[Definition] = []
        self._scope: List[str] = []

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self._add(node, ChunkType.NAMESPACE, self._qualify(node.name))
        self._descend(node)

    def visit_FunctionDef(self, node: FunctionNode) -> None:
        chunk_type = ChunkType.PRIVATE_FUNCTION if is_private(node.name) else ChunkType.FUNCTION
        self._add(node, chunk_type, f"{self._qualify(node.name)}/{arity(node.args)}")
        self._descend(node)

    visit_AsyncFunctionDef = visit_FunctionDef

    def _qualify(self, name: str) -> str:
        return ".".join(self._scope + [name])

    def _descend(self, node: Union[ast.ClassDef, FunctionNode]) -> None:
        self._scope.append(node.name)
        self.generic_visit(node)
        self._scope.pop()

    def _add(self, node: Union[ast.ClassDef, FunctionNode], chunk_type: ChunkType, name: str) -> None:
        start_line = min([node.lineno] + [d.lineno for d in node.decorator_list])
        self.definitions.append(Definition(
            chunk_type=chunk_type,
            name=name,
            start_line=start_line,
            def_line=node.lineno,
            end_line=getattr(node, "end_lineno", None),
        ))


class PythonExtractor:
    """Extracts class / function chunks from Python source."""

    language = Language.PYTHON

    def parse(self, source: str, file_path: str) -> List[Definition]:
        try:
            tree = ast.parse(source, filename=file_path)
        except SyntaxError as e:
            raise ParseFailure(file_path, e.msg, e.lineno, e.offset) from e
        except ValueError as e:
            # Null bytes on older interpreters
            raise ParseFailure(file_path, str(e)) from e

        collector = _DefinitionCollector()
        collector.visit(tree)
        return collector.definitions

    def extract(self, source: str, file_path: str) -> List[Chunk]:
        lines = split_lines(source)
        chunks = []

        for definition in self.parse(source, file_path):
            end_line = definition.end_line or estimate_end_line(lines, definition.def_line)
            end_line = min(max(end_line, definition.start_line), len(lines))

            text = "\n".join(lines[definition.start_line - 1:end_line])
            if len(text) < MIN_CHUNK_CHARS:
                continue

            chunks.append(Chunk.create(
                text=text,
                chunk_type=definition.chunk_type,
                name=definition.name,
                file_path=file_path,
                start_line=definition.start_line,
                end_line=end_line,
                language=self.language,
            ))

        return chunks

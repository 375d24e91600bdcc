"""
Command-line interface.

Usage:
    rag-review index <repo-path> [--name NAME] [--reindex]
    rag-review review (--repo NAME | --quick) [--file PATH] [--model MODEL] [--type TYPE]
    rag-review context --repo NAME [--file PATH] [--format text|json] [--limit N]
    rag-review search QUERY --repo NAME [--limit N]
    rag-review delete <name>
    rag-review list
    rag-review health

Command output goes to stdout; progress, errors and logs go to stderr.
"""

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from infra.exceptions import ApiError, GenerationError, ServiceConnectionError
from infra.llm import OLLAMA_HINT, LLMClient
from infra.logger import get_logger, setup_logging
from rag_review.adapters import OllamaEmbedder, create_vector_store
from rag_review.adapters.chroma.store import CHROMA_HINT
from rag_review.config import OllamaConfig, RuntimeConfig, StoreConfig, ollama_config, runtime_config, store_config
from rag_review.core.errors import (
    CollectionNotFound,
    EmbeddingError,
    RagReviewError,
    RepositoryNotIndexed,
)
from rag_review.core.models import RetrievalResult
from rag_review.core.ports import ChatModel, VectorStore
from rag_review.generation import Reviewer, ReviewType
from rag_review.indexing import IndexingPipeline, IndexPhase, IndexProgress
from rag_review.retrieval import Retriever

log = get_logger("rag_review.cli")

PROG = "rag-review"

EPILOG = f"""examples:
  {PROG} index /path/to/repo --name my-project
  git diff HEAD~1 | {PROG} review --repo my-project
  git diff main | {PROG} review --repo my-project --type security
  git diff | {PROG} review --quick
  git diff | {PROG} context --repo my-project --format json

prerequisites:
  1. ChromaDB: docker run -p 8000:8000 chromadb/chroma
  2. Ollama: ollama serve
  3. Embedding model: ollama pull nomic-embed-text
"""


class UsageError(Exception):
    """Invalid command-line input."""
    pass


@dataclass
class Services:
    """Collaborators wired from configuration."""
    store: VectorStore
    embedder: OllamaEmbedder
    llm: ChatModel
    runtime: RuntimeConfig

    def retriever(self, n_results: Optional[int] = None) -> Retriever:
        return Retriever(
            self.store,
            self.embedder,
            n_results=n_results or self.runtime.N_RESULTS,
            max_concurrency=self.runtime.QUERY_CONCURRENCY,
            max_chars=self.runtime.MAX_CONTEXT_CHARS,
        )

    async def close(self) -> None:
        await self.store.close()
        await self.embedder.close()


def build_services(
        store_settings: StoreConfig = store_config,
        ollama_settings: OllamaConfig = ollama_config,
        runtime_settings: RuntimeConfig = runtime_config,
) -> Services:
    return Services(
        store=create_vector_store(store_settings),
        embedder=OllamaEmbedder(ollama_settings.OLLAMA_HOST, ollama_settings.EMBEDDING_MODEL),
        llm=LLMClient(
            ollama_settings.OLLAMA_HOST,
            ollama_settings.RAG_REVIEW_MODEL,
            temperature=ollama_settings.RAG_REVIEW_TEMPERATURE,
        ),
        runtime=runtime_settings,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Context-aware code review using local LLMs",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL or WARNING)")
    parser.add_argument("--log-format", choices=["json", "console"], default=None, help="Log renderer")

    commands = parser.add_subparsers(dest="command", metavar="<command>")
    commands.required = True

    index = commands.add_parser("index", help="Index a repository for review")
    index.add_argument("path", help="Repository path")
    index.add_argument("-n", "--name", help="Collection name (default: directory name)")
    index.add_argument("-r", "--reindex", action="store_true", help="Delete existing index and re-index")

    review = commands.add_parser("review", help="Generate a code review from a diff")
    review.add_argument("-r", "--repo", help="Repository to query (required unless --quick)")
    review.add_argument("-f", "--file", help="Read diff from file instead of stdin")
    review.add_argument("-m", "--model", help="LLM model to use (default: RAG_REVIEW_MODEL)")
    review.add_argument(
        "-t", "--type",
        choices=[review_type.value for review_type in ReviewType],
        default=ReviewType.GENERAL.value,
        help="Review type (default: general)",
    )
    review.add_argument("-q", "--quick", action="store_true", help="Skip codebase context")

    context = commands.add_parser("context", help="Retrieve relevant context for a diff (no LLM call)")
    context.add_argument("-r", "--repo", help="Repository to query (required)")
    context.add_argument("-f", "--file", help="Read diff from file instead of stdin")
    context.add_argument("-o", "--format", choices=["text", "json"], default="text", help="Output format")
    context.add_argument("-l", "--limit", type=int, default=None, help="Max chunks per query (default: N_RESULTS)")

    search = commands.add_parser("search", help="Search an indexed repository with free text")
    search.add_argument("query", help="Search text")
    search.add_argument("-r", "--repo", required=True, help="Repository to query")
    search.add_argument("-l", "--limit", type=int, default=None, help="Max chunks (default: N_RESULTS)")

    delete = commands.add_parser("delete", help="Delete an indexed repository")
    delete.add_argument("name", help="Repository name (a path is reduced to its basename)")

    commands.add_parser("list", help="List indexed repositories")
    commands.add_parser("health", help="Check service health (ChromaDB, Ollama)")

    return parser


def read_diff(file_path: Optional[str]) -> str:
    """Diff text from a file, or from stdin when no file is given."""
    if file_path:
        try:
            diff = Path(file_path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise UsageError(f"Cannot read diff file {file_path}: {e}") from e
    else:
        diff = sys.stdin.read()

    if not diff.strip():
        raise UsageError("No diff provided. Pipe a diff or use --file")
    return diff


def print_progress(event: IndexProgress) -> None:
    match event.phase:
        case IndexPhase.SCANNING:
            print(f"Found {event.total} files to index", file=sys.stderr)
        case IndexPhase.PARSING:
            sys.stderr.write(f"\rParsing: {event.current}/{event.total} - {event.file}" + " " * 20)
        case IndexPhase.EMBEDDING:
            sys.stderr.write(f"\rEmbedding: batch {event.current}/{event.total}" + " " * 40)
    sys.stderr.flush()


def context_as_json(result: RetrievalResult) -> str:
    context = result.context
    chunks = [
        {
            "id": chunk.id,
            "document": chunk.document,
            "file_path": chunk.metadata.get("file_path"),
            "chunk_type": chunk.metadata.get("chunk_type"),
            "chunk_name": chunk.metadata.get("chunk_name"),
            "start_line": chunk.metadata.get("start_line"),
            "end_line": chunk.metadata.get("end_line"),
            "distance": chunk.distance,
        }
        for chunk in context.chunks_used
    ]
    return json.dumps(
        {
            "context": context.text,
            "chunks": chunks,
            "queries": result.queries,
            "estimated_tokens": context.estimated_tokens,
        },
        indent=2,
    )


# === Commands ===

async def run_index(args: argparse.Namespace, services: Services) -> int:
    name = args.name or Path(args.path).expanduser().resolve().name
    print(f"Indexing repository: {args.path}")
    print(f"Collection name: {name}")

    pipeline = IndexingPipeline(
        services.store,
        services.embedder,
        batch_size=services.runtime.EMBED_BATCH_SIZE,
        progress=print_progress,
    )
    run = pipeline.reindex if args.reindex else pipeline.run
    stats = await run(args.path, name)

    print("\n", file=sys.stderr)
    print("Indexing complete!")
    print(f"  Files processed: {stats.files}")
    print(f"  Files with errors: {stats.files_errored}")
    print(f"  Total chunks: {stats.chunks}")
    return 0


async def run_review(args: argparse.Namespace, services: Services) -> int:
    if not args.repo and not args.quick:
        raise UsageError("--repo NAME required (or use --quick for no context)")
    diff = read_diff(args.file)

    print(f"Generating {args.type} review...", file=sys.stderr)
    reviewer = Reviewer(services.store, services.retriever(), services.llm)
    if args.quick:
        result = await reviewer.quick_review(diff, review_type=args.type, model=args.model)
    else:
        result = await reviewer.review(diff, args.repo, review_type=args.type, model=args.model)

    print(result.review)
    return 0


async def run_context(args: argparse.Namespace, services: Services) -> int:
    if not args.repo:
        raise UsageError("--repo NAME required")
    diff = read_diff(args.file)

    print(f"Retrieving context from '{args.repo}'...", file=sys.stderr)
    try:
        collection = await services.store.get_collection(args.repo)
    except CollectionNotFound as e:
        raise RepositoryNotIndexed(args.repo) from e

    result = await services.retriever(args.limit).retrieve_for_diff(diff, collection)
    print(context_as_json(result) if args.format == "json" else result.context.text)
    return 0


async def run_search(args: argparse.Namespace, services: Services) -> int:
    try:
        collection = await services.store.get_collection(args.repo)
    except CollectionNotFound as e:
        raise RepositoryNotIndexed(args.repo) from e

    result = await services.retriever(args.limit).retrieve_for_query(args.query, collection)
    print(result.context.text)
    return 0


async def run_delete(args: argparse.Namespace, services: Services) -> int:
    name = Path(args.name).name or args.name
    print(f"Deleting repository: {name}")
    try:
        await services.store.delete_collection(name)
    except CollectionNotFound as e:
        raise UsageError(f"Repository '{name}' not found") from e
    print(f"Repository '{name}' deleted successfully.")
    return 0


async def run_list(args: argparse.Namespace, services: Services) -> int:
    collections = await services.store.list_collections()
    if not collections:
        print("No repositories indexed yet.")
        print(f"Run: {PROG} index <path>")
        return 0

    print("Indexed repositories:\n")
    for collection in collections:
        print(f"  - {collection.name}")
    return 0


async def run_health(args: argparse.Namespace, services: Services) -> int:
    print("Checking services...\n")
    healthy = True

    try:
        version = await services.store.health_check()
        print(f"ChromaDB: ✓ Running (version {version})")
    except (ServiceConnectionError, RagReviewError, ApiError) as e:
        log.debug("health.chroma.failed", error=str(e))
        print("ChromaDB: ✗ Not reachable")
        print(f"  {CHROMA_HINT}")
        healthy = False

    model = services.embedder.model
    try:
        models = await services.embedder.list_models()
    except (ServiceConnectionError, ApiError) as e:
        log.debug("health.ollama.failed", error=str(e))
        print("Ollama: ✗ Not reachable")
        print(f"  {OLLAMA_HINT}")
        return 1

    if any(model in name for name in models):
        print("Ollama: ✓ Running with embedding model")
    else:
        print(f"Ollama: ✗ Missing embedding model '{model}'")
        print(f"  Available: {', '.join(models)}")
        print(f"  Run: ollama pull {model}")
        healthy = False

    return 0 if healthy else 1


COMMANDS = {
    "index": run_index,
    "review": run_review,
    "context": run_context,
    "search": run_search,
    "delete": run_delete,
    "list": run_list,
    "health": run_health,
}


def error(*lines: str) -> int:
    for line in lines:
        print(line, file=sys.stderr)
    return 1


async def dispatch(args: argparse.Namespace, services: Services) -> int:
    try:
        return await COMMANDS[args.command](args, services)
    except UsageError as e:
        return error(f"Error: {e}")
    except RepositoryNotIndexed as e:
        return error(f"Error: {e}", f"Run: {PROG} index <path> --name {e.repo_name}")
    except EmbeddingError as e:
        return error("Error: Failed to generate embeddings", f"Reason: {e}", f"Is Ollama running? Check: {PROG} health")
    except ServiceConnectionError as e:
        return error(f"Error: {e}", *([f"  {e.hint}"] if e.hint else []))
    except (RagReviewError, GenerationError, ApiError) as e:
        return error(f"Error: {e}")
    finally:
        await services.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or runtime_config.LOG_LEVEL, args.log_format or runtime_config.LOG_FORMAT)

    services = build_services()
    return asyncio.run(dispatch(args, services))
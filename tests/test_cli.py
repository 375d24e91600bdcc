import io
import json
import sys

import pytest
import structlog
from conftest import SAMPLE_DIFF, FakeChat, FakeEmbedder

from infra.logger import setup_logging
from rag_review import cli
from rag_review.adapters.memory.store import MemoryVectorStore
from rag_review.config import RuntimeConfig


@pytest.fixture
def services(monkeypatch):
    services = cli.Services(MemoryVectorStore(), FakeEmbedder(), FakeChat(), RuntimeConfig())
    monkeypatch.setattr(cli, "build_services", lambda: services)
    monkeypatch.setattr(cli, "setup_logging", lambda level, renderer: None)
    return services


@pytest.fixture
def diff_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO(SAMPLE_DIFF))


@pytest.fixture
def indexed(services, sample_repo, capsys):
    assert cli.main(["index", str(sample_repo)]) == 0
    capsys.readouterr()
    return services


class TestParser:

    def test_review_defaults(self):
        args = cli.build_parser().parse_args(["review", "--repo", "shop"])

        assert args.command == "review"
        assert args.type == "general"
        assert args.quick is False
        assert args.file is None

    def test_context_options(self):
        args = cli.build_parser().parse_args(["context", "-r", "shop", "-o", "json", "-l", "3"])
        assert (args.repo, args.format, args.limit) == ("shop", "json", 3)

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_unknown_review_type(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["review", "--type", "style"])


class TestIndexAndList:

    def test_index(self, services, sample_repo, capsys):
        assert cli.main(["index", str(sample_repo), "--name", "storefront"]) == 0

        out = capsys.readouterr().out
        assert "Collection name: storefront" in out
        assert "Files processed: 2" in out
        assert "Total chunks: 6" in out

    def test_list_empty(self, services, capsys):
        assert cli.main(["list"]) == 0
        assert "No repositories indexed yet." in capsys.readouterr().out

    def test_list(self, indexed, capsys):
        assert cli.main(["list"]) == 0
        assert "  - shop" in capsys.readouterr().out

    def test_index_missing_path(self, services, tmp_path, capsys):
        assert cli.main(["index", str(tmp_path / "nowhere")]) == 1
        assert "does not exist" in capsys.readouterr().err


class TestReview:

    def test_review(self, indexed, diff_stdin, capsys):
        assert cli.main(["review", "--repo", "shop"]) == 0

        captured = capsys.readouterr()
        assert captured.out.strip() == indexed.llm.reply.strip()
        assert "Generating general review..." in captured.err

    def test_quick_review_skips_retrieval(self, services, diff_stdin, capsys):
        assert cli.main(["review", "--quick", "--type", "security"]) == 0
        assert services.embedder.calls == []

    def test_review_from_file(self, indexed, tmp_path, capsys):
        diff_file = tmp_path / "change.diff"
        diff_file.write_text(SAMPLE_DIFF)

        assert cli.main(["review", "--repo", "shop", "--file", str(diff_file), "--model", "big-model"]) == 0
        assert indexed.llm.calls[0]["model"] == "big-model"

    def test_repo_required(self, services, diff_stdin, capsys):
        assert cli.main(["review"]) == 1
        assert "--repo NAME required" in capsys.readouterr().err

    def test_empty_diff(self, services, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("  \n"))

        assert cli.main(["review", "--quick"]) == 1
        assert "No diff provided" in capsys.readouterr().err

    def test_unindexed_repository(self, services, diff_stdin, capsys):
        assert cli.main(["review", "--repo", "ghost"]) == 1

        err = capsys.readouterr().err
        assert "Repository 'ghost' not indexed" in err
        assert "Run: rag-review index <path> --name ghost" in err

    def test_embedding_failure(self, indexed, diff_stdin, capsys):
        indexed.embedder.fail = True

        assert cli.main(["review", "--repo", "shop"]) == 1
        assert "Failed to generate embeddings" in capsys.readouterr().err


class TestContextAndSearch:

    def test_context_text(self, indexed, diff_stdin, capsys):
        assert cli.main(["context", "--repo", "shop"]) == 0
        assert "## billing/invoice.py" in capsys.readouterr().out

    def test_context_json(self, indexed, diff_stdin, capsys):
        assert cli.main(["context", "--repo", "shop", "--format", "json", "--limit", "2"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["queries"][0] == "File: billing/invoice.py"
        assert payload["chunks"]
        assert {"file_path", "chunk_name", "distance"} <= set(payload["chunks"][0])

    def test_logs_stay_off_stdout(self, indexed, diff_stdin, capsys):
        setup_logging("INFO", "json")
        structlog.configure(cache_logger_on_first_use=False)

        assert cli.main(["context", "--repo", "shop", "--format", "json"]) == 0

        captured = capsys.readouterr()
        assert json.loads(captured.out)["chunks"]
        assert "retrieve.diff.complete" in captured.err

    def test_search(self, indexed, capsys):
        assert cli.main(["search", "round cents", "--repo", "shop", "--limit", "1"]) == 0
        assert "## billing/invoice.py" in capsys.readouterr().out


class TestDelete:

    def test_delete(self, indexed, capsys):
        assert cli.main(["delete", "shop"]) == 0
        assert "Repository 'shop' deleted successfully." in capsys.readouterr().out
        assert cli.main(["list"]) == 0
        assert "No repositories indexed yet." in capsys.readouterr().out

    def test_delete_accepts_path(self, indexed, sample_repo, capsys):
        assert cli.main(["delete", str(sample_repo)]) == 0

    def test_delete_missing(self, services, capsys):
        assert cli.main(["delete", "ghost"]) == 1
        assert "Repository 'ghost' not found" in capsys.readouterr().err


def test_health(services, capsys):
    assert cli.main(["health"]) == 0
    assert "Running with embedding model" in capsys.readouterr().out


def test_health_missing_model(services, capsys):
    services.embedder.model = "mxbai-embed-large"

    assert cli.main(["health"]) == 1
    assert "ollama pull mxbai-embed-large" in capsys.readouterr().out

import re
from typing import Dict, List, Optional

import pytest
import structlog

from infra.logger import setup_logging
from rag_review.adapters.memory.store import MemoryVectorStore
from rag_review.core.errors import EmbeddingError

DIMENSIONS = 512


class FakeEmbedder:
    """In-memory embedder with the OllamaEmbedder surface."""

    def __init__(self, fail: bool = False, model: str = "fake-embed") -> None:
        self.fail = fail
        self.model = model
        self.calls: List[List[str]] = []
        self.closed = False
        self.vocabulary: Dict[str, int] = {}
        self.installed = [f"{model}:latest"]

    def vector(self, text: str) -> List[float]:
        """Bag of words over a vocabulary grown on first sight of each token."""
        vector = [0.0] * DIMENSIONS
        for token in re.findall(r"\w+", text.lower()):
            if token not in self.vocabulary:
                self.vocabulary[token] = len(self.vocabulary) % DIMENSIONS
            vector[self.vocabulary[token]] += 1.0
        return vector

    async def embed(self, texts: List[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        if self.fail:
            raise EmbeddingError("embedding service down")
        return [self.vector(text) for text in texts]

    async def list_models(self) -> List[str]:
        return list(self.installed)

    async def close(self) -> None:
        self.closed = True


class FakeChat:
    """Chat model returning a canned reply and recording requests."""

    default_model = "fake-model"

    def __init__(self, reply: str = "## Summary\nLooks good.") -> None:
        self.reply = reply
        self.calls: List[Dict] = []

    async def chat(
            self,
            messages: List[Dict[str, str]],
            model: Optional[str] = None,
            temperature: Optional[float] = None,
    ) -> str:
        self.calls.append({"messages": messages, "model": model, "temperature": temperature})
        return self.reply


SAMPLE_PYTHON = '''"""Billing helpers."""


class Invoice:
    def __init__(self, amount):
        self.amount = amount

    def total(self, tax_rate):
        return self.amount * (1 + tax_rate)


def _round_cents(value):
    return round(value, 2)


def charge(invoice, card, *, retries=3):
    amount = _round_cents(invoice.total(0.2))
    return card.pay(amount, retries=retries)
'''

SAMPLE_DIFF = """diff --git a/billing/invoice.py b/billing/invoice.py
index 83db48f..bf269f4 100644
--- a/billing/invoice.py
+++ b/billing/invoice.py
@@ -8,3 +8,4 @@ class Invoice:
     def total(self, tax_rate):
-        return self.amount * (1 + tax_rate)
+        subtotal = self.amount * (1 + tax_rate)
+        return _round_cents(subtotal)
"""


@pytest.fixture(autouse=True)
def stderr_logging():
    """JSON logs on stderr, rebound to the current stream for every test."""
    setup_logging("WARNING", "json")
    structlog.configure(cache_logger_on_first_use=False)


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def chat() -> FakeChat:
    return FakeChat()


@pytest.fixture
def memory_store() -> MemoryVectorStore:
    return MemoryVectorStore()


@pytest.fixture
def sample_repo(tmp_path):
    """Small repository: Python and JavaScript sources, ignored and unsupported files."""
    repo = tmp_path / "shop"
    (repo / "billing").mkdir(parents=True)
    (repo / "billing" / "invoice.py").write_text(SAMPLE_PYTHON)
    (repo / "web").mkdir()
    (repo / "web" / "app.js").write_text("function render(state) {\n  return `<p>${state.total}</p>`;\n}\n")
    (repo / "README.md").write_text("# Shop\n")
    (repo / "node_modules" / "lib").mkdir(parents=True)
    (repo / "node_modules" / "lib" / "index.js").write_text("module.exports = {};\n")
    (repo / ".gitignore").write_text("generated/\n")
    (repo / "generated").mkdir()
    (repo / "generated" / "schema.py").write_text("SCHEMA = {'version': 1}\n")
    return repo

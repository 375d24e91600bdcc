"""
Review generation.

Orchestrates:
1. Collection lookup
2. Context retrieval for the diff
3. Prompt building
4. Chat completion
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from infra.logger import get_logger
from rag_review.core.errors import CollectionNotFound, RepositoryNotIndexed
from rag_review.core.models import DiffAnalysis, RetrievedResult
from rag_review.core.ports import ChatModel, VectorStore
from rag_review.generation.prompts import ReviewType, get_prompts
from rag_review.retrieval.retriever import Retriever

log = get_logger("rag_review.generation.reviewer")

NO_CODEBASE_CONTEXT = "_No codebase context available._"


@dataclass
class ReviewResult:
    review: str
    model: str
    context_chunks: List[RetrievedResult] = field(default_factory=list)
    queries: List[str] = field(default_factory=list)
    analysis: Optional[DiffAnalysis] = None
    estimated_tokens: int = 0


def build_messages(system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


class Reviewer:
    """
    Generates code reviews for diffs, with or without codebase context.
    """

    def __init__(self, store: VectorStore, retriever: Retriever, llm: ChatModel, default_model: Optional[str] = None) -> None:
        self.store = store
        self.retriever = retriever
        self.llm = llm
        self.default_model = default_model or llm.default_model

    async def _generate(
            self,
            diff: str,
            context: str,
            review_type: ReviewType | str,
            repo_name: str,
            model: Optional[str],
            focus_areas: Optional[Iterable[str]],
    ) -> str:
        system_prompt, user_prompt = get_prompts(review_type, diff, context, repo_name, focus_areas)
        return await self.llm.chat(build_messages(system_prompt, user_prompt), model=model or self.default_model)

    async def review(
            self,
            diff: str,
            repo_name: str,
            review_type: ReviewType | str = ReviewType.GENERAL,
            model: Optional[str] = None,
            focus_areas: Optional[Iterable[str]] = None,
    ) -> ReviewResult:
        """Review a diff against an indexed repository. Raises RepositoryNotIndexed."""
        log.info("review.start", repo=repo_name, review_type=str(getattr(review_type, "value", review_type)))

        try:
            collection = await self.store.get_collection(repo_name)
        except CollectionNotFound as e:
            raise RepositoryNotIndexed(repo_name) from e

        retrieval = await self.retriever.retrieve_for_diff(diff, collection)
        context = retrieval.context
        log.debug("review.context", chunks=len(context.chunks_used), estimated_tokens=context.estimated_tokens)

        review_text = await self._generate(diff, context.text, review_type, repo_name, model, focus_areas)
        return ReviewResult(
            review=review_text,
            model=model or self.default_model,
            context_chunks=context.chunks_used,
            queries=retrieval.queries,
            analysis=retrieval.analysis,
            estimated_tokens=context.estimated_tokens,
        )

    async def quick_review(
            self,
            diff: str,
            review_type: ReviewType | str = ReviewType.GENERAL,
            model: Optional[str] = None,
            repo_name: str = "repository",
            focus_areas: Optional[Iterable[str]] = None,
    ) -> ReviewResult:
        """Review the diff alone, without retrieval."""
        review_text = await self._generate(diff, NO_CODEBASE_CONTEXT, review_type, repo_name, model, focus_areas)
        return ReviewResult(review=review_text, model=model or self.default_model)

    async def review_with_context(
            self,
            diff: str,
            context: str,
            review_type: ReviewType | str = ReviewType.GENERAL,
            model: Optional[str] = None,
            repo_name: str = "repository",
            focus_areas: Optional[Iterable[str]] = None,
    ) -> ReviewResult:
        """Review the diff with a caller-supplied context string."""
        review_text = await self._generate(diff, context, review_type, repo_name, model, focus_areas)
        return ReviewResult(review=review_text, model=model or self.default_model)

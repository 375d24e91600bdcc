from .prompts import ReviewType, get_prompts
from .reviewer import NO_CODEBASE_CONTEXT, Reviewer, ReviewResult

__all__ = [
    "NO_CODEBASE_CONTEXT",
    "ReviewResult",
    "ReviewType",
    "Reviewer",
    "get_prompts",
]

"""
rag-review: context-aware code review with local LLMs.

Indexes a repository into semantic chunks, retrieves the chunks related
to a diff and feeds them into the review prompt.
"""

__version__ = "0.1.0"

"""
Infrastructure primitives.

This package contains low-level building blocks for talking to
external services (vector store, embedding and chat endpoints).

No business logic.
"""

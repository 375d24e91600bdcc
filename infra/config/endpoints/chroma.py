"""API endpoints for the Chroma vector store (v2 REST API)."""

from dataclasses import dataclass


@dataclass
class Chroma:
    VERSION: str = "/api/v2/version"
    DATABASE: str = "/api/v2/tenants/{tenant}/databases/{database}"
    COLLECTIONS: str = DATABASE + "/collections"
    COLLECTION: str = COLLECTIONS + "/{collection}"
    UPSERT: str = COLLECTION + "/upsert"
    QUERY: str = COLLECTION + "/query"

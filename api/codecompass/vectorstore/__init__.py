"""
Vector store module for embedding retrieval.

This module provides an abstraction layer over the vector database
(Qdrant) used by the search loop.

Key operations:
- Shared async client management
- Collection bootstrap
"""

from codecompass.vectorstore.client import ensure_collection, get_qdrant_client

__all__ = ["get_qdrant_client", "ensure_collection"]

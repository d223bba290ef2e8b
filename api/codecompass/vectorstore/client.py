"""
Vector database client.

This module provides the interface to the Qdrant vector database: a
shared async client and bootstrap of the collection searched by the
refinement loop.
"""

import logging
from typing import Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, VectorParams

from codecompass.core.config import settings
from codecompass.core.retry import with_retry

logger = logging.getLogger(__name__)

_client: Optional[AsyncQdrantClient] = None


def get_qdrant_client(timeout: Optional[float] = None) -> AsyncQdrantClient:
    """Get or create the singleton AsyncQdrantClient instance."""
    global _client
    if _client is None:
        logger.info(f"Connecting to Qdrant at {settings.QDRANT_URL}")
        _client = AsyncQdrantClient(
            url=settings.QDRANT_URL,
            api_key=settings.QDRANT_API_KEY,
            timeout=int(timeout or settings.QDRANT_TIMEOUT),
        )
    return _client


async def ensure_collection(
    client: AsyncQdrantClient,
    collection_name: str,
    vector_size: int,
) -> bool:
    """
    Create the collection with cosine distance if it does not exist.

    Args:
        client: Qdrant client
        collection_name: Collection to check
        vector_size: Dimension of the embedding model

    Returns:
        True if the collection was created, False if it already existed
    """

    async def _ensure() -> bool:
        if await client.collection_exists(collection_name):
            return False
        await client.create_collection(
            collection_name=collection_name,
            vectors_config=VectorParams(size=vector_size, distance=Distance.COSINE),
        )
        return True

    created = await with_retry(_ensure)
    if created:
        logger.info(f"Created collection: {collection_name} (size={vector_size})")
    return created

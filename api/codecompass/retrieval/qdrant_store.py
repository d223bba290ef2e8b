from typing import List, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Filter

from codecompass.core.schemas import SearchResult
from codecompass.vectorstore.client import get_qdrant_client


class QdrantSearchBackend:
    """Similarity search over a Qdrant collection, results best first."""

    def __init__(self, client: Optional[AsyncQdrantClient] = None):
        self._client = client

    @property
    def client(self) -> AsyncQdrantClient:
        if self._client is None:
            self._client = get_qdrant_client()
        return self._client

    async def search(
        self,
        collection_name: str,
        vector: List[float],
        limit: int,
        query_filter: Optional[Filter] = None,
    ) -> List[SearchResult]:
        response = await self.client.query_points(
            collection_name=collection_name,
            query=vector,
            limit=limit,
            query_filter=query_filter,
            with_payload=True,
        )
        return [SearchResult.from_scored_point(point) for point in response.points]

from types import SimpleNamespace

import pytest
from qdrant_client.models import FieldCondition, Filter, MatchAny

from codecompass.core.schemas import FileChunkPayload
from codecompass.retrieval.qdrant_store import QdrantSearchBackend


class FakeAsyncQdrant:
    def __init__(self, points):
        self.points = points
        self.kwargs = None

    async def query_points(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(points=self.points)


@pytest.mark.asyncio
async def test_search_converts_scored_points():
    client = FakeAsyncQdrant(
        [
            SimpleNamespace(
                id="p1",
                score=0.91,
                payload={"dataType": "file_chunk", "filepath": "src/a.ts", "file_content_chunk": "a"},
            ),
            SimpleNamespace(id="p2", score=0.4, payload={"dataType": "unknown"}),
        ]
    )
    query_filter = Filter(must=[FieldCondition(key="filepath", match=MatchAny(any=["src/a.ts"]))])

    results = await QdrantSearchBackend(client).search(
        "codecompass", vector=[0.1, 0.2], limit=4, query_filter=query_filter
    )

    assert client.kwargs == {
        "collection_name": "codecompass",
        "query": [0.1, 0.2],
        "limit": 4,
        "query_filter": query_filter,
        "with_payload": True,
    }
    assert [r.id for r in results] == ["p1", "p2"]
    assert isinstance(results[0].payload, FileChunkPayload)
    assert results[1].payload is None
    assert results[1].score == 0.4


@pytest.mark.asyncio
async def test_search_with_no_hits():
    results = await QdrantSearchBackend(FakeAsyncQdrant([])).search("c", vector=[0.0], limit=1)
    assert results == []

from typing import List, Optional, Sequence

import pytest

from codecompass.core.config import RefinementConfig
from codecompass.core.schemas import (
    CommitInfoPayload,
    FileChunkPayload,
    SearchResult,
)


def file_hit(
    id: str,
    score: Optional[float],
    filepath: str = "src/auth/login.ts",
    content: str = "",
) -> SearchResult:
    return SearchResult(
        id=id,
        score=score,
        payload=FileChunkPayload(filepath=filepath, file_content_chunk=content),
    )


def commit_hit(id: str, score: Optional[float], message: str = "") -> SearchResult:
    return SearchResult(
        id=id,
        score=score,
        payload=CommitInfoPayload(commit_oid=id, commit_message=message),
    )


class FakeBackend:
    """Search backend returning queued result lists and recording every call."""

    def __init__(self, responses: Sequence[List[SearchResult]], error: Optional[Exception] = None):
        self.responses = list(responses)
        self.error = error
        self.calls = []

    async def search(self, collection_name, vector, limit, query_filter=None):
        self.calls.append(
            {
                "collection_name": collection_name,
                "vector": vector,
                "limit": limit,
                "query_filter": query_filter,
            }
        )
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0] if self.responses else []


class FakeEmbedder:
    def __init__(self):
        self.queries = []

    async def __call__(self, text: str) -> List[float]:
        self.queries.append(text)
        return [0.1, 0.2, 0.3]


@pytest.fixture
def refinement_config() -> RefinementConfig:
    return RefinementConfig(
        collection_name="test_refine_collection",
        default_limit=5,
        max_refinement_iterations=2,
        relevance_threshold=0.75,
    )


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()

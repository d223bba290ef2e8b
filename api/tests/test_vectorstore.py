import asyncio

import pytest
from qdrant_client.models import Distance

from codecompass.vectorstore.client import ensure_collection


class FakeCollections:
    def __init__(self, exists, failures=0):
        self.exists = exists
        self.failures = failures
        self.created = []

    async def collection_exists(self, name):
        if self.failures:
            self.failures -= 1
            raise ConnectionError("not reachable yet")
        return self.exists

    async def create_collection(self, collection_name, vectors_config):
        self.created.append((collection_name, vectors_config))


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    async def fake_sleep(seconds):
        return None

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)


@pytest.mark.asyncio
async def test_creates_missing_collection():
    client = FakeCollections(exists=False)
    assert await ensure_collection(client, "codecompass", 768) is True
    name, vectors = client.created[0]
    assert name == "codecompass"
    assert vectors.size == 768
    assert vectors.distance == Distance.COSINE


@pytest.mark.asyncio
async def test_existing_collection_is_left_alone():
    client = FakeCollections(exists=True)
    assert await ensure_collection(client, "codecompass", 768) is False
    assert client.created == []


@pytest.mark.asyncio
async def test_transient_errors_are_retried():
    client = FakeCollections(exists=False, failures=1)
    assert await ensure_collection(client, "codecompass", 384) is True

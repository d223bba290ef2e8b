import pytest
from qdrant_client.models import PayloadSchemaType

from scripts.setup_indexes import KEYWORD_FIELDS, setup_indexes


class FakeIndexClient:
    def __init__(self, existing=(), broken=()):
        self.existing = set(existing)
        self.broken = set(broken)
        self.created = []
        self.deleted = []

    async def create_payload_index(self, collection_name, field_name, field_schema):
        if field_name in self.broken:
            raise RuntimeError("boom")
        if field_name in self.existing:
            raise RuntimeError(f"Index for {field_name} already exists")
        self.created.append((collection_name, field_name, field_schema))

    async def delete_payload_index(self, collection_name, field_name):
        self.deleted.append(field_name)
        self.existing.discard(field_name)


@pytest.mark.asyncio
async def test_creates_keyword_indexes():
    client = FakeIndexClient()
    assert await setup_indexes(client, "codecompass") == 0
    assert [c[1] for c in client.created] == KEYWORD_FIELDS
    assert all(c[2] == PayloadSchemaType.KEYWORD for c in client.created)


@pytest.mark.asyncio
async def test_existing_indexes_are_not_failures():
    client = FakeIndexClient(existing={"filepath"}, broken={"commit_oid"})
    assert await setup_indexes(client, "codecompass") == 1
    assert [c[1] for c in client.created] == ["dataType"]


@pytest.mark.asyncio
async def test_force_recreates_indexes():
    client = FakeIndexClient(existing={"filepath"})
    assert await setup_indexes(client, "codecompass", force=True) == 0
    assert client.deleted == KEYWORD_FIELDS
    assert len(client.created) == 3

"""
Setup the Qdrant collection and its payload indexes.

Creates the collection searched by the refinement loop if it is missing,
then keyword indexes on the payload fields used for filtering
(filepath, dataType, commit_oid).

Usage:
    python -m scripts.setup_indexes [--vector-size N] [--force]
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import PayloadSchemaType

from codecompass.core.config import settings
from codecompass.vectorstore.client import ensure_collection, get_qdrant_client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

KEYWORD_FIELDS = ["filepath", "dataType", "commit_oid"]


async def setup_indexes(
    client: AsyncQdrantClient, collection_name: str, force: bool = False
) -> int:
    """
    Create keyword payload indexes for filtering.

    Args:
        client: Qdrant client instance
        collection_name: Name of the collection to index
        force: If True, delete and recreate existing indexes

    Returns:
        Number of fields whose index could not be created
    """
    logger.info(f"Setting up indexes for collection: {collection_name}")
    failures = 0

    for field in KEYWORD_FIELDS:
        if force:
            try:
                await client.delete_payload_index(
                    collection_name=collection_name,
                    field_name=field,
                )
                logger.info(f"Deleted existing index for '{field}'")
            except Exception as e:
                logger.info(f"No existing index for '{field}' to delete: {e}")

        try:
            await client.create_payload_index(
                collection_name=collection_name,
                field_name=field,
                field_schema=PayloadSchemaType.KEYWORD,
            )
            logger.info(f"Created keyword index for '{field}'")
        except Exception as e:
            if "already exists" in str(e).lower():
                logger.info(f"Index for '{field}' already exists")
            else:
                failures += 1
                logger.error(f"Failed to create index for '{field}': {e}")

    logger.info("Index setup complete")
    return failures


async def run(vector_size: Optional[int], force: bool) -> int:
    client = get_qdrant_client()
    collection_name = settings.COLLECTION_NAME

    if vector_size is None:
        from codecompass.retrieval.embedding import get_embedding_dimension

        vector_size = get_embedding_dimension()

    await ensure_collection(client, collection_name, vector_size)
    info = await client.get_collection(collection_name)
    logger.info(f"Collection '{collection_name}' has {info.points_count} points")

    return await setup_indexes(client, collection_name, force=force)


def main():
    """Main entry point for collection and index setup."""
    parser = argparse.ArgumentParser(description="Setup Qdrant collection and payload indexes")
    parser.add_argument(
        "--vector-size",
        type=int,
        default=None,
        help="Embedding dimension (default: read from the configured model)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Force recreate indexes (delete existing first)",
    )
    args = parser.parse_args()

    failures = asyncio.run(run(args.vector_size, args.force))
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()

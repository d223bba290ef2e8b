"""
Query embedding generation.

The same embedding model must be used for both indexing and query-time
embedding to ensure vector space consistency.
"""

import asyncio
import logging

from sentence_transformers import SentenceTransformer

from codecompass.core.config import settings
from codecompass.core.retry import with_retry
from codecompass.retrieval.preprocess import preprocess_text

logger = logging.getLogger(__name__)

_model = None


def get_embedding_model():
    global _model
    if _model is None:
        logger.info(f"Loading embedding model {settings.EMBEDDING_MODEL}")
        _model = SentenceTransformer(
            settings.EMBEDDING_MODEL,
            device=settings.EMBEDDING_DEVICE,
            trust_remote_code=True,
        )
        _model.eval()
    return _model


def embed_query(text: str) -> list[float]:
    model = get_embedding_model()
    return model.encode(
        text,
        normalize_embeddings=True,
        convert_to_numpy=True,
        show_progress_bar=False,
    ).tolist()


def get_embedding_dimension() -> int:
    return get_embedding_model().get_sentence_embedding_dimension()


async def generate_embedding(text: str) -> list[float]:
    """
    Embed a query for vector search.

    The text is normalized and truncated to MAX_INPUT_LENGTH characters.
    Encoding runs in a worker thread and is retried with backoff; the
    error of the last attempt propagates to the caller.
    """
    processed = preprocess_text(text)[: settings.MAX_INPUT_LENGTH]
    logger.debug(f"Generating embedding for text (length: {len(processed)})")
    return await with_retry(lambda: asyncio.to_thread(embed_query, processed))

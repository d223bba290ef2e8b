"""
Application configuration management.

This module centralizes all configuration settings for the application,
loading values from environment variables with sensible defaults. A
``.env`` file is read at import time; values already present in the process
environment take precedence over the file.

Configuration categories:
- Vector database connection settings
- Embedding model configuration
- Query refinement parameters
- Retry and logging settings
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}={raw!r}, using default {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {name}={raw!r}, using default {default}")
        return default


@dataclass(frozen=True)
class RefinementConfig:
    """
    Immutable snapshot of the values the refinement loop reads at call entry.

    Attributes:
        collection_name: Qdrant collection searched on every iteration.
        default_limit: Result limit used when the caller passes none.
        max_refinement_iterations: Refinement budget when the caller passes none.
        relevance_threshold: Top score at which the loop stops refining.
    """

    collection_name: str
    default_limit: int
    max_refinement_iterations: int
    relevance_threshold: float


@dataclass
class Config:
    """
    Central configuration for the CodeCompass search service.

    All configuration values are loaded from environment variables.
    This class serves as the single source of truth for application settings.
    """

    # Qdrant
    QDRANT_URL: str = os.getenv("QDRANT_URL", "http://127.0.0.1:6333")
    QDRANT_API_KEY: Optional[str] = os.getenv("QDRANT_API_KEY") or None
    QDRANT_TIMEOUT: float = _env_float("QDRANT_TIMEOUT", 30.0)
    COLLECTION_NAME: str = os.getenv("COLLECTION_NAME", "codecompass")

    # Embeddings
    EMBEDDING_MODEL: str = os.getenv("EMBEDDING_MODEL", "nomic-ai/nomic-embed-text-v1.5")
    EMBEDDING_DEVICE: str = os.getenv("EMBEDDING_DEVICE", "cpu")
    MAX_INPUT_LENGTH: int = _env_int("MAX_INPUT_LENGTH", 4096)

    # Refinement
    QDRANT_SEARCH_LIMIT_DEFAULT: int = _env_int("QDRANT_SEARCH_LIMIT_DEFAULT", 10)
    MAX_REFINEMENT_ITERATIONS: int = _env_int("MAX_REFINEMENT_ITERATIONS", 2)
    RELEVANCE_THRESHOLD: float = _env_float("RELEVANCE_THRESHOLD", 0.75)

    # Retry
    MAX_RETRIES: int = _env_int("MAX_RETRIES", 3)
    RETRY_DELAY: float = _env_float("RETRY_DELAY", 2.0)

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def refinement_config(self) -> RefinementConfig:
        """Take the snapshot consumed by ``search_with_refinement``."""
        return RefinementConfig(
            collection_name=self.COLLECTION_NAME,
            default_limit=self.QDRANT_SEARCH_LIMIT_DEFAULT,
            max_refinement_iterations=self.MAX_REFINEMENT_ITERATIONS,
            relevance_threshold=self.RELEVANCE_THRESHOLD,
        )


settings = Config()

"""
Qdrant filter construction for refinement searches.

This module converts the caller's file restriction into a Qdrant Filter
object for payload-based filtering in vector searches.
"""

import logging
from typing import List, Optional, Sequence

from qdrant_client.models import FieldCondition, Filter, MatchAny

logger = logging.getLogger(__name__)

FILEPATH_KEY = "filepath"


class QdrantFilterBuilder:
    """
    Builds Qdrant Filter objects for searches.

    Supported filters:
    - filepaths: result location must be any of the given paths
    """

    def build_filepath_filter(self, filepaths: Optional[Sequence[str]]) -> Optional[Filter]:
        """
        Build a filter restricting results to the given file paths.

        Args:
            filepaths: Paths to match; empty strings and duplicates are ignored

        Returns:
            Qdrant Filter object, or None if no paths are given
        """
        if not filepaths:
            return None

        paths: List[str] = list(dict.fromkeys(p for p in filepaths if p))
        if not paths:
            return None

        return Filter(
            must=[
                FieldCondition(
                    key=FILEPATH_KEY,
                    match=MatchAny(any=paths),
                )
            ]
        )


# Module-level singleton
_filter_builder: Optional[QdrantFilterBuilder] = None


def get_filter_builder() -> QdrantFilterBuilder:
    """Get or create the singleton QdrantFilterBuilder instance."""
    global _filter_builder
    if _filter_builder is None:
        _filter_builder = QdrantFilterBuilder()
    return _filter_builder

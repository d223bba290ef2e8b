"""
Retrieval module for adaptive semantic search over an indexed codebase.

This module handles the query-time retrieval workflow:
- Text normalization and keyword extraction
- Lexical query refinement (broaden, focus, tweak)
- Qdrant filter construction for file restrictions
- The search loop that refines a query until results are relevant enough
"""

from codecompass.retrieval.filter_builder import QdrantFilterBuilder, get_filter_builder
from codecompass.retrieval.keywords import extract_keywords
from codecompass.retrieval.pipeline import (
    RetrievalPipeline,
    get_pipeline,
    search_with_refinement,
)
from codecompass.retrieval.query_refinement import (
    broaden_query,
    focus_query_based_on_results,
    refine_query,
    tweak_query,
)

__all__ = [
    "RetrievalPipeline",
    "get_pipeline",
    "search_with_refinement",
    "refine_query",
    "broaden_query",
    "focus_query_based_on_results",
    "tweak_query",
    "extract_keywords",
    "QdrantFilterBuilder",
    "get_filter_builder",
]

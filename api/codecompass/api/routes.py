"""
API route definitions.

This module defines the HTTP endpoints for the search service:
- POST /search - Search with adaptive query refinement
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from codecompass.core.schemas import SearchRequest, SearchResponse
from codecompass.retrieval.pipeline import RetrievalPipeline, get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    pipeline: RetrievalPipeline = Depends(get_pipeline),
) -> SearchResponse:
    """Run the refinement loop for a query and return the final results."""
    try:
        return await pipeline.search(
            request.query,
            filepaths=request.filepaths,
            limit=request.limit,
            max_refinements=request.max_refinements,
            relevance_threshold=request.relevance_threshold,
        )
    except Exception as e:
        logger.error(f"Search failed for query {request.query!r}: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail=f"Search backend error: {e}") from e

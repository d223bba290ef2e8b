"""
Retrieval pipeline orchestration.

This module runs the adaptive search loop:
Query → Embedding → Vector Search → Relevance → Refinement → Query ...

The loop stops as soon as the top result reaches the relevance threshold
or the refinement budget is spent, and always returns the results of the
most recent search. Embedding and search failures are not caught here;
they propagate to the caller, which owns retry and timeout policy.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence, Tuple

from qdrant_client.models import Filter

from codecompass.core.config import RefinementConfig, settings
from codecompass.core.schemas import RefinementResult, SearchResult
from codecompass.retrieval.filter_builder import get_filter_builder
from codecompass.retrieval.qdrant_store import QdrantSearchBackend
from codecompass.retrieval.query_refinement import refine_query

logger = logging.getLogger(__name__)

Embedder = Callable[[str], Awaitable[List[float]]]
Refiner = Callable[[str, Sequence[SearchResult], float], str]


class SearchBackend(Protocol):
    async def search(
        self,
        collection_name: str,
        vector: List[float],
        limit: int,
        query_filter: Optional[Filter] = None,
    ) -> List[SearchResult]: ...


@dataclass(frozen=True)
class RefinementState:
    """Loop-local state of one refinement run."""

    current_query: str
    iterations_used: int = 0
    last_relevance: float = 0.0


def compute_relevance(results: Sequence[SearchResult]) -> float:
    """Score of the first result; 0 if there is none or its score is unusable."""
    if not results:
        return 0.0
    score = results[0].score
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return 0.0
    if not math.isfinite(score):
        return 0.0
    return float(score)


def step(
    state: RefinementState,
    results: Sequence[SearchResult],
    relevance: float,
    relevance_threshold: float,
    max_refinements: int,
    refine: Refiner = refine_query,
) -> Tuple[RefinementState, bool]:
    """
    Advance the loop by one search outcome.

    Args:
        state: State before this search's outcome is applied
        results: Results of the search run with ``state.current_query``
        relevance: Relevance of ``results``
        relevance_threshold: Relevance at which the loop stops (inclusive)
        max_refinements: Refinement budget
        refine: Query refinement function

    Returns:
        (next_state, done). When done, next_state keeps the query that
        produced ``results``; otherwise it carries the refined query.
    """
    state = replace(state, last_relevance=relevance)
    if relevance >= relevance_threshold or state.iterations_used >= max_refinements:
        return state, True

    refined = refine(state.current_query, results, relevance)
    if refined == state.current_query:
        logger.warning(f"Refinement left query unchanged: {refined!r}")

    return (
        replace(state, current_query=refined, iterations_used=state.iterations_used + 1),
        False,
    )


async def search_with_refinement(
    client: SearchBackend,
    initial_query: str,
    filepaths: Optional[Sequence[str]] = None,
    limit: Optional[int] = None,
    max_refinements: Optional[int] = None,
    relevance_threshold: Optional[float] = None,
    *,
    embed: Optional[Embedder] = None,
    config: Optional[RefinementConfig] = None,
    refine: Refiner = refine_query,
) -> RefinementResult:
    """
    Search, refining the query until the top result is relevant enough.

    Performs at most ``max_refinements + 1`` searches.

    Args:
        client: Search backend
        initial_query: Query of the first search
        filepaths: Restrict results to these file paths
        limit: Results per search (default: config.default_limit)
        max_refinements: Refinement budget (default: config.max_refinement_iterations)
        relevance_threshold: Stop threshold (default: config.relevance_threshold)
        embed: Async embedding function (default: generate_embedding)
        config: Configuration snapshot (default: taken from settings)
        refine: Query refinement function

    Returns:
        RefinementResult with the last results, the query that produced
        them and their relevance
    """
    config = config or settings.refinement_config()
    if embed is None:
        from codecompass.retrieval.embedding import generate_embedding

        embed = generate_embedding

    search_limit = limit if limit and limit > 0 else config.default_limit
    budget = config.max_refinement_iterations if max_refinements is None else max(0, max_refinements)
    threshold = config.relevance_threshold if relevance_threshold is None else relevance_threshold
    query_filter = get_filter_builder().build_filepath_filter(filepaths)

    logger.info(
        f"Starting iterative search with query: {initial_query!r}, "
        f"maxRefinements: {budget}, threshold: {threshold}"
    )

    state = RefinementState(current_query=initial_query)
    while True:
        vector = await embed(state.current_query)
        results = await client.search(
            config.collection_name,
            vector=vector,
            limit=search_limit,
            query_filter=query_filter,
        )
        relevance = compute_relevance(results)
        logger.info(
            f"Refinement iteration {state.iterations_used}: query {state.current_query!r} "
            f"yielded {len(results)} results with relevance {relevance:.2f}"
        )

        state, done = step(state, results, relevance, threshold, budget, refine)
        if done:
            break

    logger.info(
        f"Completed search with {state.iterations_used} refinements. "
        f"Final query: {state.current_query!r}, final relevance: {state.last_relevance:.2f}"
    )
    return RefinementResult(
        results=list(results),
        refined_query=state.current_query,
        relevance_score=state.last_relevance,
    )


class RetrievalPipeline:
    """
    Binds a search backend, an embedder and a configuration snapshot.

    Used by the HTTP layer; the defaults talk to Qdrant and the local
    sentence-transformers model.
    """

    def __init__(
        self,
        backend: Optional[SearchBackend] = None,
        embed: Optional[Embedder] = None,
        config: Optional[RefinementConfig] = None,
    ):
        self.backend = backend or QdrantSearchBackend()
        self.embed = embed
        self.config = config or settings.refinement_config()

    async def search(
        self,
        query: str,
        filepaths: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
        max_refinements: Optional[int] = None,
        relevance_threshold: Optional[float] = None,
    ) -> RefinementResult:
        return await search_with_refinement(
            self.backend,
            query,
            filepaths=filepaths,
            limit=limit,
            max_refinements=max_refinements,
            relevance_threshold=relevance_threshold,
            embed=self.embed,
            config=self.config,
        )


# Module-level singleton
_pipeline: Optional[RetrievalPipeline] = None


def get_pipeline() -> RetrievalPipeline:
    """Get or create the singleton RetrievalPipeline instance."""
    global _pipeline
    if _pipeline is None:
        _pipeline = RetrievalPipeline()
    return _pipeline

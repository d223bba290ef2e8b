"""
Lexical query refinement strategies.

This module rewrites a search query using signals from the results the
previous query produced. Three strategies are available and the
dispatcher picks one per call from the relevance of the top result:

- broaden: drop over-specific qualifiers and file extensions
- focus: add keywords mined from the top results
- tweak: add the file extension and directory of the top result

Every function returns a usable query for any input; degenerate input
(empty query, no results, payloads without text) yields a fallback or the
query unchanged, never an exception.
"""

import logging
import math
import re
from typing import Callable, NamedTuple, Optional, Sequence, Tuple

from codecompass.core.schemas import SearchResult, payload_filepath, payload_text
from codecompass.retrieval.keywords import extract_keywords, tokenize

logger = logging.getLogger(__name__)

# Broadening
BROADEN_FALLBACK_QUERY = "general code context"
BROADEN_PADDING_TERMS = "implementation code"
MIN_BROADENED_WORDS = 2

_QUALIFIERS = re.compile(r"\b(?:exact|specific|only|must)\b", re.IGNORECASE)
_EXTENSION_TOKEN = re.compile(r"\.[A-Za-z0-9]{1,4}\b")
_QUOTES_AND_BRACKETS = re.compile(r"[\"'{}()\[\]]")

# Focusing
FOCUS_TOP_RESULTS = 2
FOCUS_SNIPPET_LENGTH = 200
FOCUS_KEYWORD_COUNT = 2

# Tweaking
EXCLUDED_DIRECTORIES = frozenset(
    {"src", "lib", "dist", "build", "out", "node_modules", "vendor"}
)

_FILE_EXTENSION = re.compile(r"\.([A-Za-z0-9]+)$")


def broaden_query(query: str) -> str:
    """
    Remove over-specific terms from a query.

    Qualifiers ("exact", "specific", "only", "must") and file-extension
    tokens such as ".ts" are removed. An empty outcome becomes
    BROADEN_FALLBACK_QUERY; an outcome shorter than MIN_BROADENED_WORDS
    words is padded with BROADEN_PADDING_TERMS.

    Args:
        query: Query to broaden

    Returns:
        A non-empty broadened query
    """
    broadened = _QUOTES_AND_BRACKETS.sub(" ", query)
    broadened = _EXTENSION_TOKEN.sub("", broadened)
    broadened = _QUALIFIERS.sub("", broadened)
    broadened = " ".join(broadened.split())

    if not broadened:
        return BROADEN_FALLBACK_QUERY
    if len(broadened.split()) < MIN_BROADENED_WORDS:
        return f"{broadened} {BROADEN_PADDING_TERMS}"
    return broadened


def focus_query_based_on_results(query: str, results: Sequence[SearchResult]) -> str:
    """
    Append keywords mined from the top results to a query.

    Takes the text of the first FOCUS_TOP_RESULTS results, extracts
    keywords from it and appends up to FOCUS_KEYWORD_COUNT of those the
    query does not already contain.

    Args:
        query: Query to focus
        results: Results of the previous search, best first

    Returns:
        The focused query, or the query unchanged if no new keyword was found
    """
    if not results:
        return query

    snippets = [
        payload_text(result.payload)[:FOCUS_SNIPPET_LENGTH]
        for result in results[:FOCUS_TOP_RESULTS]
    ]
    keywords = extract_keywords(" ".join(s for s in snippets if s))

    present = set(tokenize(query))
    new_keywords = [kw for kw in keywords if kw not in present][:FOCUS_KEYWORD_COUNT]
    if not new_keywords:
        return query

    return " ".join([query, *new_keywords]).strip()


def _file_context(filepath: str) -> Tuple[Optional[str], Optional[str]]:
    """Split a file path into (extension, top-level directory)."""
    parts = [p for p in filepath.replace("\\", "/").split("/") if p and p != "."]
    if not parts:
        return None, None

    match = _FILE_EXTENSION.search(parts[-1])
    extension = match.group(1) if match else None
    directory = parts[0] if len(parts) > 1 else None
    return extension, directory


def tweak_query(query: str, results: Sequence[SearchResult]) -> str:
    """
    Add file context from the top result to a query.

    Appends the extension of the top result's file when the query has no
    such token, and "in <directory>" when the query lacks the file's
    directory and the directory is not in EXCLUDED_DIRECTORIES. Applying
    the function twice with the same results changes nothing further.

    Args:
        query: Query to tweak
        results: Results of the previous search, best first

    Returns:
        The tweaked query, or the query unchanged
    """
    if not results:
        return query

    filepath = payload_filepath(results[0].payload)
    if not filepath:
        return query

    extension, directory = _file_context(filepath)
    tokens = set(tokenize(query))
    additions = []

    if extension and extension.lower() not in tokens:
        additions.append(extension)

    if directory and directory.lower() not in EXCLUDED_DIRECTORIES:
        directory_tokens = tokenize(directory)
        if directory_tokens and not tokens.issuperset(directory_tokens):
            additions.append(f"in {directory}")

    if not additions:
        return query

    return " ".join(part for part in [query, *additions] if part)


class RefinementStrategies(NamedTuple):
    """The strategy functions the dispatcher chooses from."""

    broaden: Callable[[str], str]
    focus: Callable[[str, Sequence[SearchResult]], str]
    tweak: Callable[[str, Sequence[SearchResult]], str]


DEFAULT_STRATEGIES = RefinementStrategies(
    broaden=broaden_query,
    focus=focus_query_based_on_results,
    tweak=tweak_query,
)

BROADEN = "broaden"
FOCUS = "focus"
TWEAK = "tweak"

# (inclusive lower bound, strategy), checked top-down; first match wins
REFINEMENT_TIERS: Tuple[Tuple[float, str], ...] = (
    (0.7, TWEAK),
    (0.3, FOCUS),
    (-math.inf, BROADEN),
)


def select_strategy(relevance: float) -> str:
    """Name of the strategy the tier table assigns to a relevance score."""
    for lower_bound, strategy in REFINEMENT_TIERS:
        if relevance >= lower_bound:
            return strategy
    # NaN compares false against every bound
    return BROADEN


def refine_query(
    query: str,
    results: Sequence[SearchResult],
    relevance: float,
    strategies: Optional[RefinementStrategies] = None,
) -> str:
    """
    Rewrite a query with exactly one strategy chosen by relevance.

    Args:
        query: Query that produced ``results``
        results: Results of the previous search, best first
        relevance: Score of the top result (0 when there were none)
        strategies: Strategy functions to dispatch to (default: the module's own)

    Returns:
        The refined query
    """
    strategies = strategies or DEFAULT_STRATEGIES
    strategy = select_strategy(relevance)

    logger.debug(f"Relevance {relevance:.2f} -> {strategy} query: {query!r}")

    if strategy == BROADEN:
        return strategies.broaden(query)
    if strategy == FOCUS:
        return strategies.focus(query, results)
    return strategies.tweak(query, results)

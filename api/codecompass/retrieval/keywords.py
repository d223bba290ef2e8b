"""
Keyword extraction from free text.

Used to mine query terms from the content of search results.
"""

import re
from typing import List

from codecompass.retrieval.preprocess import preprocess_text

STOPWORDS = frozenset(
    {
        "the", "and", "that", "this", "with", "from", "have", "for",
        "is", "was", "are", "were", "be", "been", "being", "it", "its",
        "a", "an", "to", "of", "in", "on", "at", "by",
    }
)

MIN_KEYWORD_LENGTH = 3

_NON_WORD = re.compile(r"\W+")


def tokenize(text: str) -> List[str]:
    """Split text on non-word boundaries into lowercase tokens."""
    return [token for token in _NON_WORD.split(text.lower()) if token]


def extract_keywords(text: str) -> List[str]:
    """
    Extract a deduplicated keyword sequence from text.

    Tokens are lowercased; stopwords, tokens shorter than
    MIN_KEYWORD_LENGTH and purely numeric tokens are dropped. Order
    follows first occurrence.

    Args:
        text: Arbitrary text, possibly empty

    Returns:
        Keywords in first-occurrence order
    """
    keywords: List[str] = []
    seen = set()
    for token in tokenize(preprocess_text(text)):
        if token in seen or token in STOPWORDS:
            continue
        if len(token) < MIN_KEYWORD_LENGTH or token.isdigit():
            continue
        seen.add(token)
        keywords.append(token)
    return keywords

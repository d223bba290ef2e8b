"""
Text preprocessing for queries and result snippets.

This module handles normalization of text before tokenization and
embedding generation. Preprocessing steps include:
- Control character removal (newlines and tabs are kept)
- Whitespace cleanup
"""

import re

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
_WHITESPACE_RUN = re.compile(r"\s+")


def _collapse(match: re.Match) -> str:
    return "\n" if "\n" in match.group(0) else " "


def preprocess_text(text: str) -> str:
    """
    Normalize text for downstream processing.

    Strips control characters, collapses every whitespace run to a single
    space (or a single newline when the run contains one) and trims.
    """
    if not text:
        return ""
    text = _CONTROL_CHARS.sub("", text)
    text = _WHITESPACE_RUN.sub(_collapse, text)
    return text.strip()

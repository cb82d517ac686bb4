# omwx/evidence/extract.py
"""
Snippet extraction for evidence items.

A snippet is the report text surrounding a matched token, cut to a fixed
window on each side and marked with "..." where it was cut. Line breaks in
multi-line TAFs are collapsed so a snippet always reads as one line.
"""

import re
from typing import Optional

SNIPPET_WINDOW = 24
ELLIPSIS = "..."

_WHITESPACE_RE = re.compile(r"\s+")


def extract_snippet(text: str, start: int, end: int, window: int = SNIPPET_WINDOW) -> Optional[str]:
    """
    Extract the text around [start, end).

    Args:
        text: Full report text
        start: Offset of the first matched character
        end: Offset one past the last matched character
        window: Characters kept on each side of the match

    Returns:
        Snippet string, or None when the offsets fall outside the text

    Example:
        >>> extract_snippet("METAR EGLL 011200Z 27005KT 0300 FG", 32, 34, window=6)
        '...0300 FG'
    """
    if not text or start < 0 or end > len(text) or start >= end:
        return None

    lo = max(0, start - window)
    hi = min(len(text), end + window)

    snippet = _WHITESPACE_RE.sub(" ", text[lo:hi]).strip()
    if lo > 0:
        snippet = ELLIPSIS + snippet
    if hi < len(text):
        snippet = snippet + ELLIPSIS
    return snippet

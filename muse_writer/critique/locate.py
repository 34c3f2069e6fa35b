"""Exact-match lookup of critique quotes in the live chapter text."""

from typing import List


def locate_quote(content: str, quote: str) -> List[int]:
    """Start offsets of every non-overlapping occurrence of ``quote``."""
    if not quote or not content:
        return []

    offsets = []
    start = content.find(quote)
    while start != -1:
        offsets.append(start)
        start = content.find(quote, start + len(quote))
    return offsets


def quote_context(content: str, offset: int, length: int, radius: int = 30) -> str:
    """Snippet around a located quote, with ellipses where text was cut."""
    begin = max(0, offset - radius)
    end = min(len(content), offset + length + radius)
    snippet = content[begin:end].replace("\n", " ")
    if begin > 0:
        snippet = "…" + snippet
    if end < len(content):
        snippet = snippet + "…"
    return snippet

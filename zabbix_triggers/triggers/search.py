from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

PATTERN_MARKER = "/"
"""Prefix that marks a search token as the search pattern."""


class SearchQuery(NamedTuple):
    """Free-text search split into literal words and a pattern."""

    words: tuple[str, ...] = ()
    pattern: str = ""


def parse_search_query(tokens: Iterable[str]) -> SearchQuery:
    """Split search tokens into literal words and a single pattern.

    A token prefixed with `/` is the pattern (with the prefix removed).
    If several tokens are prefixed, the last one wins.
    """
    words: list[str] = []
    pattern = ""
    for token in tokens:
        if token.startswith(PATTERN_MARKER):
            pattern = token[len(PATTERN_MARKER) :]
        else:
            words.append(token)
    return SearchQuery(words=tuple(words), pattern=pattern)

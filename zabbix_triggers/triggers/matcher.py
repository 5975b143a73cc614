from __future__ import annotations


def match_pattern(pattern: str, subject: str) -> bool:
    """Check if a trigger string matches a search pattern.

    The match is a case-sensitive substring match. Characters have no
    special meaning. An empty pattern matches everything.
    """
    if not pattern:
        return True
    return pattern in subject

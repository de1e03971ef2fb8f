"""Loose matching of a package name against existing repository names."""

from __future__ import annotations

import re
from collections.abc import Sequence

_NOT_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


def _normalize(value: str) -> str:
    return _NOT_ALPHANUMERIC.sub("", value.lower())


def fuzzy_match(needle: str, haystack: Sequence[str]) -> str | None:
    """Return the entry of *haystack* that best matches *needle*.

    Both sides are lowercased and stripped of everything but letters and
    digits; every entry containing the normalised needle is a match.  Among
    matches an exact original match wins, then an exact normalised match,
    then the first match in list order.  A needle without letters or digits
    only matches itself.

    Examples::

        fuzzy_match("My-Repo", ["my-repo", "other"]) -> "my-repo"
        fuzzy_match("xyz", ["abc", "def"])          -> None
    """
    normalized_needle = _normalize(needle)
    if not normalized_needle:
        return needle if needle in haystack else None
    matches = [
        (index, normalized)
        for index, normalized in enumerate(_normalize(entry) for entry in haystack)
        if normalized_needle in normalized
    ]
    if not matches:
        return None

    for index, _ in matches:
        if haystack[index] == needle:
            return haystack[index]
    for index, normalized in matches:
        if normalized == normalized_needle:
            return haystack[index]
    return haystack[matches[0][0]]

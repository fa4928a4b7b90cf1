"""Duplicate detection over content titles."""

import re
from typing import Any, Dict, List

# ASCII word characters, any Unicode whitespace
_PUNCTUATION = re.compile(r"[^A-Za-z0-9_\s]")


def normalize_title(title: str) -> str:
    """Lower-case ``title`` and drop everything but ASCII word characters and whitespace."""
    return _PUNCTUATION.sub("", (title or "").lower())


def find_duplicate_groups(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Group content items whose normalized titles are equal.

    Groups keep first-seen order, and so do the items inside a group. Only
    groups holding more than one item are returned.

    Returns:
        List of ``{"title", "normalized_title", "count", "items"}``
    """
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for item in items:
        groups.setdefault(normalize_title(item.get("title", "")), []).append(item)

    return [
        {
            "title": members[0].get("title", ""),
            "normalized_title": key,
            "count": len(members),
            "items": members,
        }
        for key, members in groups.items()
        if len(members) > 1
    ]

"""Split bullet-list content items into one item per bullet."""

import re
from typing import Any, Dict, List

BULLET_PATTERN = re.compile(
    r"(?:^|\n)(?:[-•*]|\d+\.)\s+(.*?)(?=\n[-•*]|\n\d+\.|\n\n|$)",
    re.S,
)
TITLE_PREFIX_PATTERN = re.compile(r"^(.+?)(?::|-|–|—|\.|$)")

MIN_BULLET_LENGTH = 10
MAX_BULLET_TITLE = 50
MAX_PREFIX_LENGTH = 30
SUMMARY_LENGTH = 120


def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def _bullet_title(bullet: str, prefix: str) -> str:
    title = bullet[:47] + "..." if len(bullet) > MAX_BULLET_TITLE else bullet
    title = _capitalize_first(title)
    if 0 < len(prefix) < MAX_PREFIX_LENGTH:
        return f"{prefix} - {title}"
    return title


def _summary(text: str) -> str:
    return text[:SUMMARY_LENGTH] + ("..." if len(text) > SUMMARY_LENGTH else "")


def split_bullet_points(item: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Split a generated item whose body is a bullet list.

    Each bullet of at least ``MIN_BULLET_LENGTH`` characters becomes its own
    item carrying the remaining fields of ``item``. Items with fewer than two
    bullets, or whose bullets are all too short, come back unchanged.

    Args:
        item: Dictionary with at least ``title`` and ``body``

    Returns:
        List of items
    """
    body = item.get("body")
    if not body or not isinstance(body, str):
        return [item]

    bullets = BULLET_PATTERN.findall(body)
    if len(bullets) <= 1:
        return [item]

    title = item.get("title") or ""
    prefix_match = TITLE_PREFIX_PATTERN.match(title)
    prefix = prefix_match.group(1).strip() if prefix_match else title

    split_items = []
    for bullet in bullets:
        text = bullet.strip()
        if len(text) < MIN_BULLET_LENGTH:
            continue
        new_item = dict(item)
        new_item.pop("id", None)
        new_item["title"] = _bullet_title(text, prefix)
        new_item["body"] = text
        new_item["summary"] = _summary(text)
        split_items.append(new_item)

    return split_items or [item]


def split_all(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Apply ``split_bullet_points`` to every item, flattening the result."""
    result = []
    for item in items:
        result.extend(split_bullet_points(item))
    return result

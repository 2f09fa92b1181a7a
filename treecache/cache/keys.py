"""
Key Path Helpers

Keys are colon-delimited paths ("a:b:c"). Every helper here works on
plain strings; empty segments ("a::b") are kept verbatim, never rejected.
"""

from typing import Iterable, List

from ..config.settings import settings

SEPARATOR = settings.KEY_SEPARATOR


def split_key(key: str) -> List[str]:
    """
    Split a key path into its segments.

    Examples:
        split_key("a:b:c") -> ["a", "b", "c"]
        split_key("a::b")  -> ["a", "", "b"]
        split_key("")      -> [""]
    """
    return key.split(SEPARATOR)


def join_key(segments: Iterable[str]) -> str:
    """Join segments back into a key path."""
    return SEPARATOR.join(segments)


def key_prefixes(key: str) -> List[str]:
    """
    Return every prefix of a key path, shortest first, including the key.

    Example:
        key_prefixes("a:b:c") -> ["a", "a:b", "a:b:c"]
    """
    parts = split_key(key)
    prefixes = []
    current = parts[0]
    prefixes.append(current)
    for part in parts[1:]:
        current = current + SEPARATOR + part
        prefixes.append(current)
    return prefixes


def is_same_or_descendant(candidate: str, key: str) -> bool:
    """Check if candidate is key itself or lies below it in the hierarchy."""
    return candidate == key or candidate.startswith(key + SEPARATOR)

"""
Key Index Module

The key index is the set of every key path currently present in the
cache, including every prefix of each stored key: setting "a:b:c"
indexes "a", "a:b" and "a:b:c".

The index is integrated into HierarchicalStore (store.py), but this
module provides the standalone structure so it can be tested on its own.

Existence checks are O(1) set lookups. Sub-tree removal is done by
string-prefix matching, independent of the value tree.
"""

from typing import List, Set

from .keys import is_same_or_descendant, key_prefixes


class KeyIndex:
    """
    Set of present key paths with prefix-aware insertion and removal.

    Usage:
        index = KeyIndex()
        index.add("users:42:name")
        index.contains("users:42")        # True
        index.remove_tree("users")        # ["users", "users:42", "users:42:name"]
    """

    def __init__(self):
        self._keys: Set[str] = set()

    def add(self, key: str) -> None:
        """
        Add a key and all of its prefixes.

        Already-indexed prefixes are left untouched.
        """
        self._keys.update(key_prefixes(key))

    def contains(self, key: str) -> bool:
        """Check if key is indexed."""
        return key in self._keys

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def descendants(self, key: str) -> List[str]:
        """Return strict descendants of key (sorted), by string matching."""
        return sorted(
            k for k in self._keys
            if k != key and is_same_or_descendant(k, key)
        )

    def remove_tree(self, key: str) -> List[str]:
        """
        Remove key and every indexed key below it.

        Args:
            key: Root of the sub-tree to remove

        Returns:
            Removed keys (sorted); empty if nothing matched
        """
        removed = sorted(k for k in self._keys if is_same_or_descendant(k, key))
        self._keys.difference_update(removed)
        return removed

    def remove_descendants(self, key: str) -> List[str]:
        """Remove only the strict descendants of key, keeping key itself."""
        removed = self.descendants(key)
        self._keys.difference_update(removed)
        return removed

    def size(self) -> int:
        """Get the number of indexed key paths."""
        return len(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def keys(self) -> List[str]:
        """Get all indexed key paths, sorted."""
        return sorted(self._keys)

    def clear(self) -> None:
        """Remove every key from the index."""
        self._keys.clear()

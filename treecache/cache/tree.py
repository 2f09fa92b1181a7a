"""
Value Tree Module

Nested mapping holding the cached values. Each branch maps a path
segment to a child, which is either another branch or a stored value
(a leaf).

Branches use the internal Branch type, so a dict stored by a caller is
an opaque leaf and is never walked into. Every traversal is iterative:
keys with thousands of segments cannot hit the recursion limit.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from .keys import join_key


class Branch(dict):
    """Internal mapping node of the value tree."""


@dataclass
class SetResult:
    """
    Structural side effects of ValueTree.set().

    Attributes:
        shadowed: Key paths of leaves turned into branches along the way
        replaced_branch: True if the final segment previously held a branch
    """
    shadowed: List[str] = field(default_factory=list)
    replaced_branch: bool = False


class ValueTree:
    """
    Tree of Branch mappings with values at the leaves.

    Paths are passed as pre-split segment lists (see keys.split_key).
    """

    def __init__(self):
        self._root = Branch()

    def set(self, segments: Sequence[str], value: Any) -> SetResult:
        """
        Store value at the given path, creating branches as needed.

        A leaf found at an intermediate segment is overwritten with a
        branch: the deeper key shadows the shallower value.

        Returns:
            SetResult describing what was overwritten
        """
        result = SetResult()
        current = self._root

        for depth, part in enumerate(segments[:-1]):
            child = current.get(part)
            if not isinstance(child, Branch):
                if part in current:
                    result.shadowed.append(join_key(segments[:depth + 1]))
                child = Branch()
                current[part] = child
            current = child

        last = segments[-1]
        result.replaced_branch = isinstance(current.get(last), Branch)
        current[last] = value
        return result

    def resolve(self, segments: Sequence[str]) -> Tuple[bool, Any]:
        """
        Walk the tree along the given path.

        Returns:
            (True, node) if the full path is reachable, (False, None) otherwise.
            The node is a Branch for intermediate paths.
        """
        current: Any = self._root
        for part in segments:
            if not isinstance(current, Branch) or part not in current:
                return False, None
            current = current[part]
        return True, current

    def remove(self, segments: Sequence[str]) -> bool:
        """
        Excise the node at the given path from its parent.

        Returns:
            True if a node was removed, False if any part of the path was missing
        """
        found, parent = self.resolve(segments[:-1])
        if not found or not isinstance(parent, Branch):
            return False
        return parent.pop(segments[-1], _MISSING) is not _MISSING

    @staticmethod
    def materialize(node: Any) -> Any:
        """
        Copy a branch into plain nested dicts.

        Leaves are returned unchanged.
        """
        if not isinstance(node, Branch):
            return node

        result: dict = {}
        stack = [(node, result)]
        while stack:
            source, target = stack.pop()
            for name, child in source.items():
                if isinstance(child, Branch):
                    copied: dict = {}
                    target[name] = copied
                    stack.append((child, copied))
                else:
                    target[name] = child
        return result

    def snapshot(self) -> dict:
        """Copy the whole tree into plain nested dicts."""
        return self.materialize(self._root)

    def leaves(self) -> List[Tuple[str, Any]]:
        """Return (key path, value) for every stored value, sorted by path."""
        found = []
        stack: List[Tuple[Branch, Optional[str]]] = [(self._root, None)]
        while stack:
            branch, prefix = stack.pop()
            for name, child in branch.items():
                path = name if prefix is None else join_key((prefix, name))
                if isinstance(child, Branch):
                    stack.append((child, path))
                else:
                    found.append((path, child))
        return sorted(found, key=lambda item: item[0])

    def paths(self) -> List[str]:
        """Return every reachable key path (sorted)."""
        found = []
        stack: List[Tuple[Branch, Optional[str]]] = [(self._root, None)]
        while stack:
            branch, prefix = stack.pop()
            for name, child in branch.items():
                path = name if prefix is None else join_key((prefix, name))
                found.append(path)
                if isinstance(child, Branch):
                    stack.append((child, path))
        return sorted(found)

    def leaf_count(self) -> int:
        """Count stored values (non-branch nodes)."""
        count = 0
        stack = [self._root]
        while stack:
            branch = stack.pop()
            for child in branch.values():
                if isinstance(child, Branch):
                    stack.append(child)
                else:
                    count += 1
        return count

    def is_empty(self) -> bool:
        """Check if nothing is stored."""
        return not self._root

    def clear(self) -> None:
        """Drop every node."""
        self._root = Branch()


_MISSING = object()

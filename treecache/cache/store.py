"""
Hierarchical Store Module

This module implements the core cache: values stored under
colon-delimited key paths, with TTL expiration and cascading deletes.

Three structures are kept in sync under a single lock:
- the value tree (tree.py): nested branches holding the values
- the key index (index.py): every present key path and all its prefixes
- the timer map: key -> pending expiration handle (scheduler.py)
"""

import copy
import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..config.settings import settings
from .index import KeyIndex
from .keys import split_key
from .scheduler import ExpirationScheduler, ThreadingScheduler
from .tree import ValueTree

logger = logging.getLogger(__name__)


@dataclass
class CacheOptions:
    """
    Construction options for HierarchicalStore.

    Attributes:
        ttl: Default time-to-live in seconds for set() calls without one
             (None or 0 = entries never expire)
        debug: Trace every operation through the module logger
    """
    ttl: Optional[float] = None
    debug: bool = False


class HierarchicalStore:
    """
    In-memory cache with hierarchical keys and TTL support.

    Setting "a:b:c" makes "a" and "a:b" present as branches; getting a
    branch returns the whole sub-tree as nested dicts; deleting a key
    removes everything below it.

    Operations:
    - set: Store a value, optionally with a TTL - O(depth)
    - get: Retrieve a value or sub-tree - O(depth) (+ sub-tree size for branches)
    - has: Check if a key path is present - O(1) average
    - delete: Remove a key and its descendants - O(indexed keys)
    - clear: Remove everything

    TTL semantics:
        Each TTL-bearing key gets one timer. Setting a key again cancels
        its pending timer first (and arms a new one only if the new set
        has a TTL), so a stale timer never deletes a fresh value.

    Attributes:
        default_ttl: TTL applied when set() is called without one (0 = none)
        debug: Whether operations are traced to the module logger
        copy_values: Deep-copy values on the way in and out
        scheduler: Timer backend used for expirations
    """

    def __init__(
            self,
            default_ttl: Optional[float] = None,
            debug: Optional[bool] = None,
            scheduler: Optional[ExpirationScheduler] = None,
            copy_values: Optional[bool] = None,
    ):
        """
        Initialize the store.

        Args:
            default_ttl: Default TTL in seconds (default from settings.DEFAULT_TTL)
            debug: Enable operation tracing (default from settings.DEBUG)
            scheduler: Timer backend (ThreadingScheduler if not provided)
            copy_values: Deep-copy stored values (default from settings.COPY_VALUES)

        Raises:
            ValueError: If default_ttl is negative
        """
        self.default_ttl = default_ttl if default_ttl is not None else settings.DEFAULT_TTL
        if self.default_ttl < 0:
            raise ValueError("default_ttl must not be negative")

        self.debug = debug if debug is not None else settings.DEBUG
        self.copy_values = copy_values if copy_values is not None else settings.COPY_VALUES
        self.scheduler = scheduler if scheduler is not None else ThreadingScheduler()

        self._index = KeyIndex()
        self._tree = ValueTree()
        # key -> (token, handle); the token tells a live timer from a superseded one
        self._timers: Dict[str, Tuple[object, Any]] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_options(
            cls,
            options: CacheOptions,
            scheduler: Optional[ExpirationScheduler] = None,
    ) -> "HierarchicalStore":
        """Build a store from a CacheOptions instance."""
        return cls(
            default_ttl=options.ttl or 0,
            debug=options.debug,
            scheduler=scheduler,
        )

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Store a value under a key path.

        Args:
            key: Colon-delimited key path
            value: Any value; stored as an opaque leaf
            ttl: Time-to-live in seconds. None uses the store default,
                 0 (or negative) disables expiration for this entry.

        Any leaf met at an intermediate segment is replaced by a branch,
        and any sub-tree previously stored at key is replaced by value.

        Raises:
            RuntimeError: If the scheduler cannot arm the timer (e.g. an
                AsyncioScheduler without a running loop). The store is
                left unchanged in that case.
        """
        effective_ttl = self._effective_ttl(ttl)
        self._trace("Setting key: %s with TTL: %s", key, effective_ttl or "none")

        if self.copy_values:
            value = copy.deepcopy(value)

        with self._lock:
            # Armed before any mutation: a scheduler error leaves the store unchanged
            expiry = self._schedule_expiry(key, effective_ttl) if effective_ttl else None

            self._index.add(key)
            result = self._tree.set(split_key(key), value)

            for shadowed in result.shadowed:
                self._cancel_timer(shadowed)

            if result.replaced_branch:
                for descendant in self._index.remove_descendants(key):
                    self._cancel_timer(descendant)

            self._cancel_timer(key)
            if expiry is not None:
                self._timers[key] = expiry

            self._trace("Key set: %s", key)
            self._trace_state()
            self._check_if_debug()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve the value stored under a key path.

        Args:
            key: Colon-delimited key path
            default: Returned when the key is not present

        Returns:
            The stored value, a nested dict for branch keys, or default
        """
        with self._lock:
            if not self._index.contains(key):
                self._trace("Key not found: %s", key)
                return default

            found, node = self._tree.resolve(split_key(key))
            if not found:
                logger.warning("%s Key indexed but not in tree: %s", settings.LOG_PREFIX, key)
                return default

            value = self._tree.materialize(node)

        if self.copy_values:
            value = copy.deepcopy(value)

        self._trace("Key found: %s", key)
        return value

    def has(self, key: str) -> bool:
        """
        Check if a key path is present (as a value or a branch).

        This only consults the key index; the value tree is not walked.
        """
        return self._index.contains(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def delete(self, key: str) -> None:
        """
        Delete a key path and everything below it.

        Pending expirations for the removed keys are cancelled. Deleting
        a missing key is a no-op.
        """
        self._trace("Deleting key: %s", key)
        with self._lock:
            self._delete_locked(key)

    def clear(self) -> None:
        """Remove every key and cancel every pending expiration."""
        with self._lock:
            self._cancel_all_timers()
            self._index.clear()
            self._tree.clear()
        self._trace("Cache cleared")

    def size(self) -> int:
        """Get the number of present key paths (values and branches)."""
        return self._index.size()

    def __len__(self) -> int:
        return self.size()

    def keys(self) -> List[str]:
        """Get every present key path, sorted."""
        with self._lock:
            return self._index.keys()

    def pending_expirations(self) -> List[str]:
        """Get the keys that currently have an armed TTL timer, sorted."""
        with self._lock:
            return sorted(self._timers)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing:
            - total_keys: Present key paths (values and branches)
            - leaf_keys: Key paths holding a value
            - branch_keys: Key paths holding a sub-tree
            - pending_expirations: Armed TTL timers
            - default_ttl: Store-wide default TTL (0 = none)
        """
        with self._lock:
            total = self._index.size()
            leaves = self._tree.leaf_count()
            pending = len(self._timers)

        return {
            "total_keys": total,
            "leaf_keys": leaves,
            "branch_keys": total - leaves,
            "pending_expirations": pending,
            "default_ttl": self.default_ttl,
        }

    def check_consistency(self) -> List[str]:
        """
        Compare the key index against the value tree.

        Returns:
            Human-readable descriptions of every mismatch (empty if in sync)
        """
        with self._lock:
            indexed = set(self._index.keys())
            reachable = set(self._tree.paths())
            timed = set(self._timers)

        problems = [f"indexed but not in tree: {k}" for k in sorted(indexed - reachable)]
        problems += [f"in tree but not indexed: {k}" for k in sorted(reachable - indexed)]
        problems += [f"timer for missing key: {k}" for k in sorted(timed - indexed)]
        return problems

    def close(self) -> None:
        """Cancel every pending expiration. Stored data is left in place."""
        with self._lock:
            self._cancel_all_timers()

    def __enter__(self) -> "HierarchicalStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _effective_ttl(self, ttl: Optional[float]) -> float:
        effective = ttl if ttl is not None else self.default_ttl
        return effective if effective and effective > 0 else 0

    def _delete_locked(self, key: str) -> None:
        for removed in self._index.remove_tree(key):
            self._cancel_timer(removed)

        self._tree.remove(split_key(key))

        self._trace("Key deleted: %s", key)
        self._trace_state()
        self._check_if_debug()

    def _schedule_expiry(self, key: str, ttl: float) -> Tuple[object, Any]:
        token = object()

        def expire() -> None:
            self._expire(key, token)

        return token, self.scheduler.schedule(ttl, expire)

    def _expire(self, key: str, token: object) -> None:
        """Timer callback: delete key unless its timer was superseded."""
        with self._lock:
            pending = self._timers.get(key)
            if pending is None or pending[0] is not token:
                return
            del self._timers[key]

            self._trace("TTL expired for key: %s, deleting...", key)
            self._delete_locked(key)

    def _cancel_timer(self, key: str) -> None:
        pending = self._timers.pop(key, None)
        if pending is not None:
            pending[1].cancel()

    def _cancel_all_timers(self) -> None:
        for _, handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

    def _trace(self, message: str, *args: Any) -> None:
        if self.debug:
            logger.debug(f"{settings.LOG_PREFIX} {message}", *args)

    def _trace_state(self) -> None:
        if not self.debug or not logger.isEnabledFor(logging.DEBUG):
            return
        # Flat path -> repr mapping, built without recursion
        dump = json.dumps({path: _safe_repr(value) for path, value in self._tree.leaves()})
        logger.debug("%s Current store: %s", settings.LOG_PREFIX, dump)
        logger.debug("%s Current keys: %s", settings.LOG_PREFIX, self._index.keys())

    def _check_if_debug(self) -> None:
        if not self.debug:
            return
        for problem in self.check_consistency():
            logger.warning("%s Index out of sync: %s", settings.LOG_PREFIX, problem)


def _safe_repr(value: Any) -> str:
    """repr() for trace output; never raises."""
    try:
        return repr(value)
    except Exception as e:
        return f"<unrepresentable {type(value).__name__}: {type(e).__name__}>"

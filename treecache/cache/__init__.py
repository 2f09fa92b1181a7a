"""Cache module for TreeCache."""

from .index import KeyIndex
from .scheduler import AsyncioScheduler, ExpirationScheduler, ThreadingScheduler
from .store import CacheOptions, HierarchicalStore
from .tree import ValueTree

__all__ = [
    "AsyncioScheduler",
    "CacheOptions",
    "ExpirationScheduler",
    "HierarchicalStore",
    "KeyIndex",
    "ThreadingScheduler",
    "ValueTree",
]

"""
TreeCache: Hierarchical In-Memory Cache

An in-process cache that stores values under colon-delimited keys
("a:b:c"), with per-entry or cache-wide TTL expiration and cascading
deletion of whole sub-trees.
"""

from .cache import CacheOptions, HierarchicalStore

__version__ = "1.0.0"

__all__ = ["CacheOptions", "HierarchicalStore", "__version__"]

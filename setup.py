#!/usr/bin/env python3
"""
TreeCache Setup Script
======================
Allows installation of the tree-cache package.

Usage:
    pip install -e .           # Development install
    pip install -e ".[test]"   # With test dependencies
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="tree-cache",
    version="1.0.0",
    description="In-process cache with hierarchical colon-delimited keys and TTL expiration",
    packages=find_packages(include=["treecache", "treecache.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
)

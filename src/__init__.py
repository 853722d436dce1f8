# src/__init__.py - v1
"""ragcache: retrieval-augmented prompting with response caching."""

from ragcache.version import __version__

__all__ = ["__version__"]

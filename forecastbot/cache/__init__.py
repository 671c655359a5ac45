"""Caching utilities."""

from .lookup_cache import ABSENT, CacheEntry, Lookup, LookupCache

__all__ = ["ABSENT", "CacheEntry", "Lookup", "LookupCache"]

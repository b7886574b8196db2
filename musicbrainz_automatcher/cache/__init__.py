"""Lookup cache: stores and the memoizing executor."""

from musicbrainz_automatcher.cache.executor import CachedExecutor, next_expiry
from musicbrainz_automatcher.cache.store import MISS, MemoryStore, SqlStore, create_store

__all__ = [
    "MISS",
    "CachedExecutor",
    "MemoryStore",
    "SqlStore",
    "create_store",
    "next_expiry",
]

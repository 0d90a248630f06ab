#!/usr/bin/env python3
"""
TTL Caching System

Key-value stores with per-entry expiry. A read past expiry is a miss and
is never returned. Two backends share one interface:

- InMemoryCache: process-local, lost when the run ends
- FileCache: JSON file on disk, survives between scheduled runs
"""

import json
import logging
import os
import tempfile
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class CacheEntry:
    """A single cache entry with its expiry timestamp."""
    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check if this entry has expired."""
        return now >= self.expires_at


class TTLCache(ABC):
    """Common interface of every cache backend."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or time.time
        self._stats = {
            'hits': 0,
            'misses': 0,
            'puts': 0
        }

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Returns:
            Stored value, or None if absent, expired or unreadable
        """
        pass

    @abstractmethod
    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store value under key for ttl_seconds, replacing any prior entry."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete key from cache; True if something was removed."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total_requests = self._stats['hits'] + self._stats['misses']
        hit_rate = (self._stats['hits'] / total_requests * 100) if total_requests > 0 else 0
        return {
            'backend': self.__class__.__name__,
            'entries': len(self),
            'hits': self._stats['hits'],
            'misses': self._stats['misses'],
            'hit_rate': hit_rate,
            'puts': self._stats['puts']
        }

    def _validate_ttl(self, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")


class InMemoryCache(TTLCache):
    """Process-local cache with TTL support."""

    def __init__(self, clock: Optional[Clock] = None):
        super().__init__(clock)
        self._cache: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._cache.get(key)

        if entry is None:
            self._stats['misses'] += 1
            return None

        if entry.is_expired(self._clock()):
            del self._cache[key]
            self._stats['misses'] += 1
            logger.debug(f"Cache key expired: {key}")
            return None

        self._stats['hits'] += 1
        return entry.value

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._validate_ttl(ttl_seconds)
        self._cache[key] = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl_seconds)
        self._stats['puts'] += 1
        logger.debug(f"Cached key: {key} (TTL: {ttl_seconds}s)")

    def delete(self, key: str) -> bool:
        if key in self._cache:
            del self._cache[key]
            logger.debug(f"Deleted cache key: {key}")
            return True
        return False

    def clear(self) -> None:
        count = len(self._cache)
        self._cache.clear()
        logger.debug(f"Cleared {count} cache entries")

    def __len__(self) -> int:
        return len(self._cache)


class FileCache(TTLCache):
    """
    JSON-file backed cache.

    Values must be JSON-serializable. A missing, corrupt or partially
    written file, or an entry with an unexpected shape, is treated as a
    miss rather than an error.
    """

    def __init__(self, path: Union[str, Path], clock: Optional[Clock] = None):
        super().__init__(clock)
        self.path = Path(path)

    def get(self, key: str) -> Optional[Any]:
        raw_entry = self._load().get(key)
        if raw_entry is None:
            self._stats['misses'] += 1
            return None

        try:
            entry = CacheEntry(key=key, value=raw_entry['value'], expires_at=float(raw_entry['expires_at']))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Unreadable cache entry {key}, treating as miss: {e}")
            self._stats['misses'] += 1
            return None

        if entry.is_expired(self._clock()):
            self._stats['misses'] += 1
            logger.debug(f"Cache key expired: {key}")
            return None

        self._stats['hits'] += 1
        return entry.value

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._validate_ttl(ttl_seconds)
        now = self._clock()
        # Expired entries are dropped on every write so the file stays small.
        entries = {
            k: v for k, v in self._load().items()
            if _expiry_of(v) > now
        }
        entries[key] = {'value': value, 'expires_at': now + ttl_seconds}
        self._save(entries)
        self._stats['puts'] += 1
        logger.debug(f"Cached key: {key} (TTL: {ttl_seconds}s) in {self.path}")

    def delete(self, key: str) -> bool:
        entries = self._load()
        if key not in entries:
            return False
        del entries[key]
        self._save(entries)
        logger.debug(f"Deleted cache key: {key}")
        return True

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
        logger.debug(f"Cleared cache file {self.path}")

    def __len__(self) -> int:
        return len(self._load())

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read cache file {self.path}, treating as empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Cache file {self.path} has unexpected shape, treating as empty")
            return {}
        return data

    def _save(self, entries: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(entries, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise


def create_cache(backend: str, path: Union[str, Path, None] = None, clock: Optional[Clock] = None) -> TTLCache:
    """Build a cache backend by name ('memory' or 'file')."""
    if backend == 'memory':
        return InMemoryCache(clock=clock)
    if backend == 'file':
        if path is None:
            raise ValueError("File cache requires a path")
        return FileCache(path, clock=clock)
    raise ValueError(f"Unknown cache backend '{backend}'. Available: memory, file")


def _expiry_of(raw_entry: Any) -> float:
    """Expiry timestamp of a stored entry, or 0.0 if it cannot be read."""
    if not isinstance(raw_entry, dict):
        return 0.0
    try:
        return float(raw_entry.get('expires_at', 0))
    except (TypeError, ValueError):
        return 0.0

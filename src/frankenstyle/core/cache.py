"""
Fragment Caching

Caches resolved CSS fragments so unchanged packages are not re-resolved.
Keys are derived from the package id and its CSS source, so editing a
stylesheet always produces a miss.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from .errors import make_config_error
from .models import AssemblyConfig, CssFragment, PackageDescriptor

logger = logging.getLogger(__name__)

CACHE_FORMAT_VERSION = "1"


def fragment_cache_key(package: PackageDescriptor) -> str:
    """
    Compute the cache key for a package's fragment.

    Args:
        package: Package whose fragment is cached

    Returns:
        SHA-256 hash string
    """
    key_dict = {
        "package": package.id,
        "css": package.css,
        "format": CACHE_FORMAT_VERSION,
    }
    json_str = json.dumps(key_dict, sort_keys=True)
    return hashlib.sha256(json_str.encode()).hexdigest()


class FragmentCache(ABC):
    """Base fragment cache with per-key locking."""

    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @abstractmethod
    def get(self, key: str) -> CssFragment | None:
        """Return the stored fragment for key, or None."""
        pass

    @abstractmethod
    def put(self, key: str, fragment: CssFragment) -> None:
        """Store a fragment under key."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every stored fragment."""
        pass

    def _key_lock(self, key: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _count(self, hit: bool) -> None:
        with self._locks_guard:
            if hit:
                self.hits += 1
            else:
                self.misses += 1

    def get_or_resolve(self, key: str, compute: Callable[[], CssFragment]) -> CssFragment:
        """
        Return the cached fragment for key, computing and storing it on a miss.

        At most one computation per key is in flight at a time.
        """
        with self._key_lock(key):
            cached = self.get(key)
            if cached is not None:
                self._count(hit=True)
                logger.debug("Fragment cache hit for %s", cached.package_id)
                return cached

            self._count(hit=False)
            fragment = compute()
            logger.debug("Fragment cache miss for %s", fragment.package_id)
            self.put(key, fragment)
            return fragment

    def stats(self) -> dict[str, int]:
        return {"hits": self.hits, "misses": self.misses}


class NullFragmentCache(FragmentCache):
    """Caching disabled: every lookup misses and nothing is stored."""

    def get(self, key: str) -> CssFragment | None:
        return None

    def put(self, key: str, fragment: CssFragment) -> None:
        pass

    def clear(self) -> None:
        pass

    def get_or_resolve(self, key: str, compute: Callable[[], CssFragment]) -> CssFragment:
        self._count(hit=False)
        return compute()


class MemoryFragmentCache(FragmentCache):
    """In-process fragment cache."""

    def __init__(self) -> None:
        super().__init__()
        self._store: dict[str, CssFragment] = {}
        self._store_lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._store)

    def get(self, key: str) -> CssFragment | None:
        with self._store_lock:
            return self._store.get(key)

    def put(self, key: str, fragment: CssFragment) -> None:
        with self._store_lock:
            self._store[key] = fragment

    def clear(self) -> None:
        with self._store_lock:
            self._store.clear()


class DiskFragmentCache(MemoryFragmentCache):
    """Fragment cache persisted as one JSON file per key."""

    def __init__(self, cache_dir: Path):
        """
        Initialize fragment cache.

        Args:
            cache_dir: Directory to store cache files
        """
        super().__init__()
        self.cache_dir = cache_dir
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise make_config_error(
                f"Cannot create fragment cache directory: {e}", cache_dir
            ) from e

    def _get_cache_path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    def get(self, key: str) -> CssFragment | None:
        fragment = super().get(key)
        if fragment is not None:
            return fragment

        cache_path = self._get_cache_path(key)
        if not cache_path.exists():
            return None

        try:
            fragment = CssFragment.model_validate_json(cache_path.read_text(encoding="utf-8"))
        except (OSError, ValidationError):
            logger.warning("Ignoring corrupted fragment cache file %s", cache_path)
            return None

        super().put(key, fragment)
        return fragment

    def put(self, key: str, fragment: CssFragment) -> None:
        super().put(key, fragment)
        self._get_cache_path(key).write_text(fragment.model_dump_json(), encoding="utf-8")

    def clear(self) -> None:
        """Clear all cached fragments."""
        super().clear()
        for cache_file in self.cache_dir.glob("*.json"):
            cache_file.unlink()

    def invalidate(self, key: str) -> None:
        """
        Invalidate the cached fragment for a specific key.

        Args:
            key: Cache key to drop
        """
        with self._store_lock:
            self._store.pop(key, None)
        cache_path = self._get_cache_path(key)
        if cache_path.exists():
            cache_path.unlink()


def make_fragment_cache(config: AssemblyConfig) -> FragmentCache:
    """
    Pick the cache implementation for a build configuration.

    Args:
        config: Build configuration

    Returns:
        Disk-backed cache if a cache_dir is set, in-memory otherwise, or a
        pass-through cache when caching is disabled
    """
    if not config.cached:
        return NullFragmentCache()
    if config.cache_dir is not None:
        return DiskFragmentCache(config.cache_dir)
    return MemoryFragmentCache()


__all__ = [
    "CACHE_FORMAT_VERSION",
    "fragment_cache_key",
    "FragmentCache",
    "NullFragmentCache",
    "MemoryFragmentCache",
    "DiskFragmentCache",
    "make_fragment_cache",
]

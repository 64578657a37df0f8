"""Disk-based cache of raw service specifications.

Uses :mod:`diskcache` to keep fetched raw specs on the filesystem so batch
builds do not re-download unchanged documents. Entries are keyed by
``(service, version, source)`` where *source* is the expanded location the
document came from. The content behind one pinned version at one location
never changes, so concurrent writers racing on the same key are harmless
and the last write simply wins. Deciding what is cacheable at all is the
fetcher's job; see :class:`~svcschema.fetch.fetcher.SpecFetcher`.

The cache directory is always passed in explicitly; this module never
consults the process environment.

See Also:
    :class:`~svcschema.models.CacheConfig` -- the Pydantic model that
    controls ``enabled``, ``ttl_seconds`` and ``directory``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Optional

import diskcache

from svcschema.models import CacheConfig


class SpecCache:
    """Disk-backed store of raw spec dicts keyed by ``(service, version, source)``.

    A disabled cache is a no-op: :meth:`get` always misses and :meth:`set`
    discards its input.

    Args:
        cache_dir: Root directory for the cache. A ``specs/`` subdirectory
            is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        cache = SpecCache("/tmp/svcschema-cache", CacheConfig())
        cache.set("s3", "2006-03-01", raw, source=url)
        hit = cache.get("s3", "2006-03-01", source=url)
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache_dir = Path(cache_dir)
        self._cache: Optional[diskcache.Cache] = None
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "specs"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def get(
        self, service: str, version: str, source: str = ""
    ) -> Optional[dict[str, Any]]:
        """Return the cached raw spec, or ``None`` on a miss or when disabled."""
        if self._cache is None:
            return None
        return self._cache.get(self._make_key(service, version, source))

    def set(
        self, service: str, version: str, raw_spec: dict[str, Any], source: str = ""
    ) -> None:
        """Store *raw_spec* under ``(service, version, source)``, replacing any previous entry."""
        if self._cache is None:
            return
        self._cache.set(
            self._make_key(service, version, source),
            raw_spec,
            expire=self._config.ttl_seconds,
        )

    def invalidate(self, service: str, version: str, source: str = "") -> None:
        if self._cache is None:
            return
        self._cache.delete(self._make_key(service, version, source))

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size`` (number of entries), ``directory`` (str path), and
            ``ttl_seconds``.
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "specs"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()

    def __enter__(self) -> SpecCache:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _make_key(self, service: str, version: str, source: str) -> str:
        """Content key for a service at a given spec version and location."""
        raw = f"{service}|{version}|{source}"
        return hashlib.sha256(raw.encode()).hexdigest()

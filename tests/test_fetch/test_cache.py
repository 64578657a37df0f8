"""Tests for svcschema.fetch.cache."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from svcschema.fetch.cache import SpecCache
from svcschema.models import CacheConfig


@pytest.fixture()
def cache(tmp_path: Path):
    """An enabled SpecCache rooted at tmp_path."""
    c = SpecCache(tmp_path, CacheConfig(enabled=True))
    yield c
    c.close()


@pytest.fixture()
def disabled_cache(tmp_path: Path):
    c = SpecCache(tmp_path, CacheConfig(enabled=False))
    yield c
    c.close()


def _raw(name: str = "demo") -> dict[str, Any]:
    return {"metadata": {"endpointPrefix": name}, "operations": {}, "shapes": {}}


# ------------------------------------------------------------------ #
# Core get/set behaviour
# ------------------------------------------------------------------ #


class TestGetSet:
    def test_set_and_get(self, cache: SpecCache) -> None:
        cache.set("demo", "latest", _raw())
        assert cache.get("demo", "latest") == _raw()

    def test_miss_returns_none(self, cache: SpecCache) -> None:
        assert cache.get("demo", "latest") is None

    def test_version_is_part_of_the_key(self, cache: SpecCache) -> None:
        cache.set("demo", "2020-01-01", _raw("old"))
        cache.set("demo", "2024-01-01", _raw("new"))
        assert cache.get("demo", "2020-01-01") == _raw("old")
        assert cache.get("demo", "2024-01-01") == _raw("new")
        assert cache.get("demo", "latest") is None

    def test_source_is_part_of_the_key(self, cache: SpecCache) -> None:
        cache.set("demo", "v1", _raw("a"), source="https://a.example.com/demo.json")
        assert cache.get("demo", "v1", source="https://a.example.com/demo.json") == _raw("a")
        assert cache.get("demo", "v1", source="https://b.example.com/demo.json") is None
        assert cache.get("demo", "v1") is None

    def test_last_write_wins(self, cache: SpecCache) -> None:
        cache.set("demo", "latest", _raw("first"))
        cache.set("demo", "latest", _raw("second"))
        assert cache.get("demo", "latest") == _raw("second")

    def test_invalidate(self, cache: SpecCache) -> None:
        cache.set("demo", "latest", _raw())
        cache.invalidate("demo", "latest")
        assert cache.get("demo", "latest") is None

    def test_clear(self, cache: SpecCache) -> None:
        cache.set("a", "latest", _raw("a"))
        cache.set("b", "latest", _raw("b"))
        cache.clear()
        assert cache.stats()["size"] == 0

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        with SpecCache(tmp_path, CacheConfig()) as first:
            first.set("demo", "latest", _raw())
        with SpecCache(tmp_path, CacheConfig()) as second:
            assert second.get("demo", "latest") == _raw()


# ------------------------------------------------------------------ #
# Disabled cache
# ------------------------------------------------------------------ #


class TestDisabled:
    def test_disabled_is_noop(self, disabled_cache: SpecCache) -> None:
        disabled_cache.set("demo", "latest", _raw())
        assert disabled_cache.get("demo", "latest") is None
        assert disabled_cache.enabled is False

    def test_disabled_creates_no_directory(self, tmp_path: Path) -> None:
        SpecCache(tmp_path / "never", CacheConfig(enabled=False)).close()
        assert not (tmp_path / "never").exists()

    def test_disabled_stats(self, disabled_cache: SpecCache) -> None:
        assert disabled_cache.stats() == {"enabled": False}


# ------------------------------------------------------------------ #
# Stats
# ------------------------------------------------------------------ #


class TestStats:
    def test_stats_counts_entries(self, cache: SpecCache, tmp_path: Path) -> None:
        cache.set("demo", "latest", _raw())
        stats = cache.stats()
        assert stats["enabled"] is True
        assert stats["size"] == 1
        assert stats["directory"] == str(tmp_path / "specs")
        assert stats["ttl_seconds"] is None

"""Tests for the SpecCache module."""

from __future__ import annotations

import time
from pathlib import Path

import pytest

from apiplay.cache import SpecCache
from apiplay.models import CacheConfig

SPEC_URL = "https://api.walletstats.example/openapi.json"


@pytest.fixture()
def cache(tmp_path: Path):
    c = SpecCache(tmp_path, CacheConfig(enabled=True, ttl_seconds=300))
    yield c
    c.close()


@pytest.fixture()
def disabled_cache(tmp_path: Path):
    c = SpecCache(tmp_path, CacheConfig(enabled=False))
    yield c
    c.close()


# ------------------------------------------------------------------ #
# Core get/set behaviour
# ------------------------------------------------------------------ #


class TestGetSet:
    def test_set_and_get(self, cache: SpecCache) -> None:
        cache.set(SPEC_URL, '{"openapi": "3.0.0"}', "application/json")
        assert cache.get(SPEC_URL) == ('{"openapi": "3.0.0"}', "application/json")

    def test_miss_returns_none(self, cache: SpecCache) -> None:
        assert cache.get("https://example.com/missing.yaml") is None

    def test_urls_are_distinct_keys(self, cache: SpecCache) -> None:
        cache.set(SPEC_URL, "a")
        cache.set(SPEC_URL + "?v=2", "b")
        assert cache.get(SPEC_URL) == ("a", "")
        assert cache.get(SPEC_URL + "?v=2") == ("b", "")

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        config = CacheConfig(enabled=True, ttl_seconds=300)
        first = SpecCache(tmp_path, config)
        first.set(SPEC_URL, "openapi: 3.1.0\n", "application/yaml")
        first.close()

        second = SpecCache(tmp_path, config)
        try:
            assert second.get(SPEC_URL) == ("openapi: 3.1.0\n", "application/yaml")
        finally:
            second.close()


class TestTTL:
    def test_ttl_expiry(self, tmp_path: Path) -> None:
        c = SpecCache(tmp_path, CacheConfig(enabled=True, ttl_seconds=1))
        try:
            c.set(SPEC_URL, "{}")
            assert c.get(SPEC_URL) is not None
            time.sleep(1.5)
            assert c.get(SPEC_URL) is None
        finally:
            c.close()


class TestDisabled:
    def test_get_returns_none(self, disabled_cache: SpecCache) -> None:
        disabled_cache.set(SPEC_URL, "{}")
        assert disabled_cache.get(SPEC_URL) is None
        assert disabled_cache.enabled is False

    def test_no_directory_created(self, tmp_path: Path, disabled_cache: SpecCache) -> None:
        assert not (tmp_path / "specs").exists()

    def test_stats(self, disabled_cache: SpecCache) -> None:
        assert disabled_cache.stats() == {"enabled": False}


class TestInvalidateAndClear:
    def test_invalidate(self, cache: SpecCache) -> None:
        cache.set(SPEC_URL, "a")
        cache.set("https://other.example/spec.yaml", "b")
        cache.invalidate(SPEC_URL)
        assert cache.get(SPEC_URL) is None
        assert cache.get("https://other.example/spec.yaml") is not None

    def test_invalidate_missing_is_noop(self, cache: SpecCache) -> None:
        cache.invalidate("https://nowhere.example/spec.json")

    def test_clear(self, cache: SpecCache) -> None:
        cache.set(SPEC_URL, "a")
        cache.set("https://other.example/spec.yaml", "b")
        cache.clear()
        assert cache.stats()["size"] == 0


class TestStats:
    def test_enabled_stats(self, tmp_path: Path, cache: SpecCache) -> None:
        cache.set(SPEC_URL, "{}")
        stats = cache.stats()
        assert stats["enabled"] is True
        assert stats["size"] == 1
        assert stats["directory"] == str(tmp_path / "specs")
        assert stats["ttl_seconds"] == 300

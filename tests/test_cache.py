"""
Tests for the context cache lifecycle.
"""
from __future__ import annotations

import threading

from carecheck.cache import ContextCache


class TestContextCache:

    def test_empty_cache_without_loader(self) -> None:
        cache: ContextCache[str] = ContextCache()
        assert cache.get() is None
        assert not cache.is_loaded

    def test_init_sets_value(self) -> None:
        cache: ContextCache[str] = ContextCache()
        cache.init("referentie")
        assert cache.is_loaded
        assert cache.get() == "referentie"

    def test_loader_runs_once(self) -> None:
        calls = []

        def loader() -> str:
            calls.append(1)
            return "geladen"

        cache = ContextCache(loader=loader)
        assert cache.get() == "geladen"
        assert cache.get() == "geladen"
        assert len(calls) == 1

    def test_invalidate_reloads(self) -> None:
        values = iter(["eerste", "tweede"])
        cache = ContextCache(loader=lambda: next(values))
        assert cache.get() == "eerste"
        cache.invalidate()
        assert not cache.is_loaded
        assert cache.get() == "tweede"

    def test_init_takes_precedence_over_loader(self) -> None:
        cache = ContextCache(loader=lambda: "van loader")
        cache.init("handmatig")
        assert cache.get() == "handmatig"

    def test_concurrent_first_access_loads_once(self) -> None:
        calls = []
        barrier = threading.Barrier(8)

        def loader() -> str:
            calls.append(1)
            return "gedeeld"

        cache = ContextCache(loader=loader)
        results = []

        def worker() -> None:
            barrier.wait()
            results.append(cache.get())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == ["gedeeld"] * 8
        assert len(calls) == 1

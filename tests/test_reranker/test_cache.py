"""Tests for reranker cache."""

from __future__ import annotations

from reranker.cache import RerankCache, build_cache_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance_minutes(self, minutes: float) -> None:
        self.now += minutes * 60


def _results(score: float) -> list:
    return [{"text": "a", "_rerank_score": score, "_original_index": 0}]


def test_cache_roundtrip() -> None:
    cache = RerankCache(max_size=10)
    key = build_cache_key("openai-compatible", "m", "query", ["1", "2"])
    cache.put(key, _results(0.5))
    assert cache.get(key, ttl_minutes=5) == _results(0.5)


def test_missing_key_returns_none_without_side_effects() -> None:
    cache = RerankCache(max_size=10)
    assert cache.get("absent", ttl_minutes=5) is None
    assert len(cache) == 0


def test_entry_expires_after_ttl() -> None:
    clock = FakeClock()
    cache = RerankCache(max_size=10, clock=clock)
    cache.put("k", _results(0.5))
    clock.advance_minutes(4)
    assert cache.get("k", ttl_minutes=5) is not None
    clock.advance_minutes(1)
    assert cache.get("k", ttl_minutes=5) is None
    assert "k" not in cache


def test_ttl_is_chosen_at_lookup() -> None:
    clock = FakeClock()
    cache = RerankCache(max_size=10, clock=clock)
    cache.put("k", _results(0.5))
    clock.advance_minutes(3)
    assert cache.get("k", ttl_minutes=10) is not None
    assert cache.get("k", ttl_minutes=2) is None


def test_size_bound_evicts_first_inserted() -> None:
    cache = RerankCache(max_size=1000)
    for i in range(1001):
        cache.put(f"key-{i}", _results(i / 1001))
    assert len(cache) == 1000
    assert "key-0" not in cache
    assert "key-1" in cache
    assert "key-1000" in cache


def test_eviction_ignores_reads() -> None:
    cache = RerankCache(max_size=2)
    cache.put("a", _results(0.1))
    cache.put("b", _results(0.2))
    assert cache.get("a", ttl_minutes=5) is not None
    cache.put("c", _results(0.3))
    assert "a" not in cache
    assert "b" in cache
    assert "c" in cache


def test_put_overwrites_entry() -> None:
    clock = FakeClock()
    cache = RerankCache(max_size=10, clock=clock)
    cache.put("k", _results(0.1))
    clock.advance_minutes(4)
    cache.put("k", _results(0.9))
    clock.advance_minutes(4)
    assert cache.get("k", ttl_minutes=5) == _results(0.9)
    assert len(cache) == 1


def test_returned_results_are_copies() -> None:
    cache = RerankCache(max_size=10)
    cache.put("k", _results(0.5))
    first = cache.get("k", ttl_minutes=5)
    first[0]["_rerank_score"] = 0.0
    first.append({"text": "extra"})
    assert cache.get("k", ttl_minutes=5) == _results(0.5)


def test_clear_and_stats() -> None:
    cache = RerankCache(max_size=10)
    cache.put("a", _results(0.1))
    cache.put("b", _results(0.2))
    cache.get("a", ttl_minutes=5)
    cache.get("missing", ttl_minutes=5)
    stats = cache.stats()
    assert stats == {"hits": 1, "misses": 1, "size": 2, "max_size": 10}
    assert cache.clear() == 2
    assert len(cache) == 0
    assert cache.get("a", ttl_minutes=5) is None

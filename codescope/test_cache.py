"""
Tests for the LRU cache.

Run with: python -m pytest codescope/test_cache.py -v
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from codescope.cache import LRUCache


class TestLRUCache:
    """Tests for LRUCache."""

    def test_get_missing(self):
        cache = LRUCache(2)
        assert cache.get('a') is None
        assert cache.stats()['misses'] == 1

    def test_evicts_least_recently_used(self):
        cache = LRUCache(2)
        cache.put('a', 1)
        cache.put('b', 2)
        cache.get('a')
        cache.put('c', 3)

        assert 'a' in cache
        assert 'b' not in cache
        assert 'c' in cache
        assert len(cache) == 2

    def test_first_write_wins(self):
        cache = LRUCache(2)
        cache.put('a', 1)
        cache.put('a', 2)
        assert cache.get('a') == 1

    def test_zero_capacity_disables(self):
        cache = LRUCache(0)
        cache.put('a', 1)
        assert cache.get('a') is None
        assert len(cache) == 0

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            LRUCache(-1)

    def test_get_or_compute(self):
        cache = LRUCache(4)
        calls = []

        def compute():
            calls.append(1)
            return 'value'

        assert cache.get_or_compute('k', compute) == 'value'
        assert cache.get_or_compute('k', compute) == 'value'
        assert len(calls) == 1
        assert cache.stats() == {'size': 1, 'capacity': 4, 'hits': 1, 'misses': 1}

    def test_clear_resets_counters(self):
        cache = LRUCache(2)
        cache.put('a', 1)
        cache.get('a')
        cache.clear()
        assert cache.stats() == {'size': 0, 'capacity': 2, 'hits': 0, 'misses': 0}

    def test_concurrent_puts_stay_bounded(self):
        cache = LRUCache(16)
        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(lambda i: cache.put(i, i * i), range(200)))
        assert len(cache) == 16
        for key in range(200):
            value = cache.get(key)
            assert value is None or value == key * key

"""Tests for simulation result memoization."""

import os
import sys
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import calc.result_cache as result_cache
from calc.result_cache import MAX_CACHE_SIZE, ResultCache, get_default_cache, make_cache_key
from model.FinancialInputs import FinancialInputs


def _result(tag):
    """Stand-in simulation result."""
    result = MagicMock()
    result.tag = tag
    return result


class TestCacheKey:
    """Tests for make_cache_key."""

    def test_equal_inputs_share_key(self):
        assert make_cache_key(FinancialInputs()) == make_cache_key(FinancialInputs())

    def test_any_field_change_changes_key(self):
        base = FinancialInputs()
        assert make_cache_key(base) != make_cache_key(replace(base, retirement_age=64))
        assert make_cache_key(base) != make_cache_key(replace(base, tax_rate=0.18))

    def test_field_order_irrelevant(self):
        assert make_cache_key({'a': 1, 'b': 2}) == make_cache_key({'b': 2, 'a': 1})

    def test_int_and_float_equal(self):
        assert make_cache_key({'rate': 6}) == make_cache_key({'rate': 6.0})
        assert make_cache_key(FinancialInputs(investment_return_rate=6)) == \
            make_cache_key(FinancialInputs(investment_return_rate=6.0))

    def test_negative_zero(self):
        assert make_cache_key({'savings': -0.0}) == make_cache_key({'savings': 0.0})

    def test_no_rounding(self):
        assert make_cache_key({'rate': 0.17}) != make_cache_key({'rate': 0.1700001})

    def test_nested_values(self):
        assert make_cache_key({'alloc': {'debt': 80, 'savings': 20}}) == \
            make_cache_key({'alloc': {'savings': 20.0, 'debt': 80.0}})

    def test_key_is_hex_digest(self):
        key = make_cache_key(FinancialInputs())
        assert len(key) == 64
        int(key, 16)


class TestResultCache:
    """Tests for ResultCache."""

    def test_miss_then_hit(self):
        cache = ResultCache()
        inputs = FinancialInputs()

        assert cache.get(inputs) is None
        result = _result('a')
        cache.put(inputs, result)
        assert cache.get(inputs) is result

        stats = cache.stats()
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.entries == 1
        assert stats.hit_rate == pytest.approx(0.5)

    def test_empty_stats(self):
        stats = ResultCache().stats()
        assert stats.to_dict() == {'entries': 0, 'hits': 0, 'misses': 0, 'hit_rate': 0.0}

    def test_put_replaces_existing(self):
        cache = ResultCache()
        cache.put({'x': 1}, _result('old'))
        cache.put({'x': 1}, _result('new'))

        assert len(cache) == 1
        assert cache.get({'x': 1}).tag == 'new'

    def test_evicts_least_recently_used(self):
        cache = ResultCache(max_entries=3)
        for i in range(3):
            cache.put({'i': i}, _result(i))

        # Touch the oldest entry so the second becomes the eviction candidate
        cache.get({'i': 0})
        cache.put({'i': 3}, _result(3))

        assert len(cache) == 3
        assert {'i': 0} in cache
        assert {'i': 1} not in cache
        assert {'i': 3} in cache

    def test_never_exceeds_capacity(self):
        cache = ResultCache()
        for i in range(MAX_CACHE_SIZE + 25):
            cache.put({'i': i}, _result(i))

        assert len(cache) == MAX_CACHE_SIZE
        assert {'i': 24} not in cache
        assert {'i': 25} in cache
        assert {'i': MAX_CACHE_SIZE + 24} in cache

    def test_lookup_protects_oldest_entry_at_full_capacity(self):
        cache = ResultCache()
        for i in range(MAX_CACHE_SIZE):
            cache.put({'i': i}, _result(i))

        assert cache.get({'i': 0}).tag == 0
        cache.put({'i': MAX_CACHE_SIZE}, _result(MAX_CACHE_SIZE))

        assert len(cache) == MAX_CACHE_SIZE
        assert {'i': 1} not in cache
        assert {'i': 0} in cache
        assert all({'i': i} in cache for i in range(2, MAX_CACHE_SIZE + 1))

    def test_contains_does_not_count_lookup(self):
        cache = ResultCache()
        cache.put({'x': 1}, _result('a'))

        assert {'x': 1} in cache
        assert cache.stats().hits == 0
        assert cache.stats().misses == 0

    def test_invalidate(self):
        cache = ResultCache()
        cache.put({'x': 1}, _result('a'))

        assert cache.invalidate({'x': 1}) is True
        assert cache.invalidate({'x': 1}) is False
        assert len(cache) == 0

    def test_clear_resets_counters(self):
        cache = ResultCache()
        cache.put({'x': 1}, _result('a'))
        cache.get({'x': 1})
        cache.get({'x': 2})

        cache.clear()

        assert len(cache) == 0
        assert cache.stats().hits == 0
        assert cache.stats().misses == 0

    def test_entry_bookkeeping(self):
        cache = ResultCache()
        with patch('calc.result_cache.time.time', return_value=1000.0):
            cache.put({'x': 1}, _result('a'))
        with patch('calc.result_cache.time.time', return_value=1005.0):
            cache.get({'x': 1})
            cache.get({'x': 1})

        entry = cache.entry({'x': 1})
        assert entry.created_at == 1000.0
        assert entry.last_accessed == 1005.0
        assert entry.access_count == 2

    def test_entry_missing(self):
        assert ResultCache().entry({'x': 1}) is None

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            ResultCache(max_entries=0)


def test_default_cache_is_shared():
    with patch.object(result_cache, '_default_cache', None):
        first = get_default_cache()
        assert get_default_cache() is first
        assert first.max_entries == MAX_CACHE_SIZE

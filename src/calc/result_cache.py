"""Memoization of simulation results.

Results are keyed by a SHA-256 digest of the canonical JSON form of the
inputs, so two logically identical records always share a key no matter
how they were built. The cache holds at most MAX_CACHE_SIZE entries and
evicts the least recently accessed one when full.
"""

import hashlib
import json
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from model.FinancialInputs import FinancialInputs
from model.SimulationData import WealthSimulationResult


logger = logging.getLogger(__name__)

MAX_CACHE_SIZE = 100


def _normalize(value: Any) -> Any:
    """Canonical form of a value for hashing.

    Numbers are compared by value, so 6 and 6.0 hash the same; -0.0 is
    folded into 0.0.
    """
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return float(value) + 0.0
    return str(value)


def make_cache_key(inputs: Union[FinancialInputs, Dict[str, Any]]) -> str:
    """Deterministic, field-order independent key for a set of inputs."""
    data = inputs.to_dict() if isinstance(inputs, FinancialInputs) else inputs
    blob = json.dumps(_normalize(data), sort_keys=True, ensure_ascii=False).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()


@dataclass
class CacheEntry:
    """A cached result with its bookkeeping."""
    result: WealthSimulationResult
    created_at: float
    last_accessed: float
    access_count: int = 0


@dataclass(frozen=True)
class CacheStats:
    """Read-only snapshot of cache activity."""
    entries: int
    hits: int
    misses: int
    hit_rate: float

    def to_dict(self) -> dict:
        return {
            "entries": self.entries,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hit_rate,
        }


class ResultCache:
    """Bounded LRU cache of WealthSimulationResult objects."""

    def __init__(self, max_entries: int = MAX_CACHE_SIZE):
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got: {max_entries}")
        self.max_entries = max_entries
        self._entries: 'OrderedDict[str, CacheEntry]' = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, inputs) -> bool:
        return make_cache_key(inputs) in self._entries

    def get(self, inputs: Union[FinancialInputs, Dict[str, Any]]) -> Optional[WealthSimulationResult]:
        """Return the cached result, or None on a miss.

        A hit marks the entry as the most recently used.
        """
        key = make_cache_key(inputs)
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            logger.debug("cache miss %s", key[:12])
            return None

        self._entries.move_to_end(key)
        entry.access_count += 1
        entry.last_accessed = time.time()
        self.hits += 1
        logger.debug("cache hit %s (accessed %d times)", key[:12], entry.access_count)
        return entry.result

    def put(self, inputs: Union[FinancialInputs, Dict[str, Any]], result: WealthSimulationResult) -> None:
        """Store a result, evicting the least recently used entry when full."""
        key = make_cache_key(inputs)
        now = time.time()
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(result=result, created_at=now, last_accessed=now)

        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("cache full, evicted %s", evicted[:12])

    def invalidate(self, inputs: Union[FinancialInputs, Dict[str, Any]]) -> bool:
        """Drop the entry for these inputs. Returns True if one was removed."""
        return self._entries.pop(make_cache_key(inputs), None) is not None

    def clear(self) -> None:
        """Remove every entry and reset the hit/miss counters."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def entry(self, inputs: Union[FinancialInputs, Dict[str, Any]]) -> Optional[CacheEntry]:
        """Look at an entry's bookkeeping without touching its recency."""
        return self._entries.get(make_cache_key(inputs))

    def stats(self) -> CacheStats:
        lookups = self.hits + self.misses
        return CacheStats(
            entries=len(self._entries),
            hits=self.hits,
            misses=self.misses,
            hit_rate=self.hits / lookups if lookups > 0 else 0.0,
        )


# Process-wide cache shared by callers that do not supply their own
_default_cache: Optional[ResultCache] = None


def get_default_cache() -> ResultCache:
    """Get or create the process-wide cache."""
    global _default_cache
    if _default_cache is None:
        _default_cache = ResultCache()
    return _default_cache

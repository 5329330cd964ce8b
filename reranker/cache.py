"""In-memory cache with TTL + FIFO eviction for reranking results."""

from __future__ import annotations

import hashlib
import os
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from logging_config import get_logger
from reranker.documents import extract_texts, serialize
from reranker.processing import ScoredResult

load_dotenv()

CACHE_MAX_SIZE = int(os.getenv("RERANK_CACHE_MAX_SIZE", "1000"))

logger = get_logger("unirerank.cache")


@dataclass
class CacheStats:
    """Cache statistics."""
    hits: int = 0
    misses: int = 0


def _short_hash(value: str) -> str:
    return hashlib.blake2b(value.encode("utf-8"), digest_size=8).hexdigest()


def build_cache_key(service: str, model: str, query: str, documents: Sequence[Any]) -> str:
    """Build a stable cache key for a reranking request.
    
    The key covers the backend, the model, the query text and the ordered
    extracted document texts. Policy values (threshold, top_k) and any
    prompt templates are not part of the key.
    
    Args:
        service: Backend identifier, e.g. ``"openai-compatible"``.
        model: Model name sent to the backend.
        query: The raw query text.
        documents: Candidate documents in request order.
    
    Returns:
        A ``service:model:query_hash:docs_hash`` string.
    """
    docs_payload = serialize(extract_texts(documents))
    return f"{service}:{model}:{_short_hash(query)}:{_short_hash(docs_payload)}"


class RerankCache:
    """Thread-safe bounded cache of scored result lists.
    
    Entries expire by the TTL given at lookup time. When the bound is
    exceeded the earliest inserted entry is evicted, regardless of how
    recently it was read.
    """
    
    def __init__(
        self,
        max_size: int = CACHE_MAX_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.
        
        Args:
            max_size: Maximum number of entries in the cache.
            clock: Source of the current time in seconds.
        """
        self._max_size = max_size
        self._clock = clock
        self._lock = threading.Lock()
        self._store: OrderedDict[str, Tuple[float, List[ScoredResult]]] = OrderedDict()
        self._stats = CacheStats()
    
    @property
    def max_size(self) -> int:
        return self._max_size
    
    def get(self, key: str, ttl_minutes: float) -> Optional[List[ScoredResult]]:
        """Get the results stored under a key.
        
        Args:
            key: The cache key.
            ttl_minutes: Maximum entry age in minutes.
        
        Returns:
            Copies of the cached results, or None if not found/expired.
            An expired entry is removed.
        """
        now = self._clock()
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._stats.misses += 1
                return None
            inserted_at, results = entry
            if now - inserted_at >= ttl_minutes * 60:
                del self._store[key]
                self._stats.misses += 1
                logger.debug("Cache entry expired: %s", key)
                return None
            self._stats.hits += 1
            return [dict(result) for result in results]
    
    def put(self, key: str, results: List[ScoredResult]) -> None:
        """Store results under a key, replacing any existing entry.
        
        Args:
            key: The cache key.
            results: Scored results, already sorted by score.
        """
        if self._max_size <= 0:
            return
        entry = (self._clock(), [dict(result) for result in results])
        with self._lock:
            self._store[key] = entry
            while len(self._store) > self._max_size:
                evicted, _ = self._store.popitem(last=False)
                logger.debug("Cache full, evicted %s", evicted)
    
    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
    
    def stats(self) -> Dict[str, int]:
        """Get cache statistics.
        
        Returns:
            Dictionary with hits, misses, size and max_size.
        """
        with self._lock:
            return {
                "hits": self._stats.hits,
                "misses": self._stats.misses,
                "size": len(self._store),
                "max_size": self._max_size,
            }
    
    def clear(self) -> int:
        """Clear all entries from the cache.
        
        Returns:
            Number of entries removed.
        """
        with self._lock:
            removed = len(self._store)
            self._store.clear()
            return removed


# Global cache instance
_cache: RerankCache | None = None


def get_cache() -> RerankCache:
    """Get or create the process-wide cache instance."""
    global _cache
    if _cache is None:
        _cache = RerankCache()
    return _cache

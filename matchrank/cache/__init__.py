"""Ranking cache and its storage backends."""

from matchrank.cache.backends import CacheBackend, CacheMetrics, InMemoryCacheBackend
from matchrank.cache.ranking_cache import (
    DEFAULT_CONTEXT_TTL_SECONDS,
    DEFAULT_PAGE_TTL_SECONDS,
    RankingCache,
    context_key,
    page_key,
)
from matchrank.cache.redis_backend import RedisCacheBackend


__all__ = [
    "DEFAULT_CONTEXT_TTL_SECONDS",
    "DEFAULT_PAGE_TTL_SECONDS",
    "CacheBackend",
    "CacheMetrics",
    "InMemoryCacheBackend",
    "RankingCache",
    "RedisCacheBackend",
    "context_key",
    "page_key",
]

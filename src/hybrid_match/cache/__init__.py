"""Scoring-result caching."""

from hybrid_match.cache.result_cache import (
    CacheStats,
    NullCache,
    ResultCache,
    ScoringCache,
    compute_fingerprint,
)

__all__ = [
    "CacheStats",
    "NullCache",
    "ResultCache",
    "ScoringCache",
    "compute_fingerprint",
]

"""Content-addressed cache of scoring results.

The cache collapses concurrent requests for the same fingerprint into a single
computation. Entries expire after a TTL and the least recently used entry is
evicted when capacity is exceeded.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from abc import ABC, abstractmethod
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict

from hybrid_match.errors import CacheError
from hybrid_match.scoring.models import CacheEntry, ScoringConfig, ScoringResult
from hybrid_match.utils.text_utils import normalized_text

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
DEFAULT_MAX_ENTRIES = 1000

ComputeFn = Callable[[], Awaitable[ScoringResult]]


def compute_fingerprint(
    requirement_text: str,
    candidate_text: str,
    config: ScoringConfig,
) -> str:
    """Stable hash of (normalized requirement, normalized candidate, full config)."""
    payload = json.dumps(
        {
            "requirement": normalized_text(requirement_text),
            "candidate": normalized_text(candidate_text),
            "config": config.model_dump(mode="json"),
        },
        sort_keys=True,
        ensure_ascii=False,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class CacheStats(BaseModel):
    """Counters describing cache effectiveness."""

    model_config = ConfigDict(frozen=True)

    entries: int
    in_flight: int
    hits: int
    misses: int
    evictions: int
    expirations: int

    @property
    def hit_rate(self) -> float:
        """Share of lookups served without a new computation."""
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScoringCache(ABC):
    """Interface of a scoring-result cache injected into the orchestrator."""

    @abstractmethod
    async def get_or_compute(self, fingerprint: str, compute: ComputeFn) -> ScoringResult:
        """Return the cached result for ``fingerprint`` or compute and store it."""
        pass

    @abstractmethod
    def stats(self) -> CacheStats:
        """Return current cache counters."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every stored entry."""
        pass


class ResultCache(ScoringCache):
    """In-memory TTL + LRU cache with single-flight computation.

    Concurrent callers sharing a fingerprint await the same task. The task is
    shielded, so a caller that gives up does not cancel the computation other
    waiters depend on; the result still lands in the cache. Degraded results
    are returned but never stored, so a later call can retry the remote stages.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.ttl = timedelta(seconds=ttl_seconds)
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._in_flight: dict[str, asyncio.Task[ScoringResult]] = {}
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, fingerprint: object) -> bool:
        return isinstance(fingerprint, str) and self._lookup(fingerprint) is not None

    async def get_or_compute(self, fingerprint: str, compute: ComputeFn) -> ScoringResult:
        """Return a cached result, join an in-flight computation, or start one.

        Results served from storage or from another caller's computation have
        ``from_cache=True``. The caller that ran the computation gets it with
        ``from_cache=False``.

        Raises:
            CacheError: If an in-flight computation for this fingerprint belongs
                to another event loop and cannot be joined.
        """
        entry = self._lookup(fingerprint)
        if entry is not None:
            self._hits += 1
            logger.debug(f"Cache hit: {fingerprint[:12]}")
            return entry.result.model_copy(update={"from_cache": True})

        task = self._in_flight.get(fingerprint)
        if task is not None:
            if task.get_loop() is not asyncio.get_running_loop():
                raise CacheError(f"In-flight computation {fingerprint[:12]} belongs to another loop")
            self._hits += 1
            logger.debug(f"Cache join: {fingerprint[:12]}")
            result = await asyncio.shield(task)
            return result if result.degraded else result.model_copy(update={"from_cache": True})

        self._misses += 1
        logger.debug(f"Cache miss: {fingerprint[:12]}")
        task = asyncio.ensure_future(self._compute_and_store(fingerprint, compute))
        self._in_flight[fingerprint] = task
        task.add_done_callback(lambda done: self._finish(fingerprint, done))
        return await asyncio.shield(task)

    def stats(self) -> CacheStats:
        """Return current cache counters."""
        return CacheStats(
            entries=len(self._entries),
            in_flight=len(self._in_flight),
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
            expirations=self._expirations,
        )

    def clear(self) -> None:
        """Drop every stored entry. In-flight computations are left running."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cache cleared ({count} entries)")

    async def _compute_and_store(self, fingerprint: str, compute: ComputeFn) -> ScoringResult:
        result = await compute()
        if result.degraded:
            logger.debug(f"Not caching degraded result {fingerprint[:12]}")
        else:
            self._store(fingerprint, result)
        return result

    def _finish(self, fingerprint: str, task: asyncio.Task[ScoringResult]) -> None:
        if self._in_flight.get(fingerprint) is task:
            del self._in_flight[fingerprint]
        # Mark the exception as retrieved when every waiter has gone away
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"Scoring computation {fingerprint[:12]} failed: {task.exception()}")

    def _lookup(self, fingerprint: str) -> CacheEntry | None:
        entry = self._entries.get(fingerprint)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[fingerprint]
            self._expirations += 1
            return None
        self._entries.move_to_end(fingerprint)
        return entry

    def _store(self, fingerprint: str, result: ScoringResult) -> None:
        now = self._clock()
        self._purge_expired(now)

        # Replace, never mutate: a new entry object takes the old one's slot
        self._entries.pop(fingerprint, None)
        self._entries[fingerprint] = CacheEntry(
            fingerprint=fingerprint,
            result=result.model_copy(update={"from_cache": False}),
            created_at=now,
            expires_at=now + self.ttl,
        )

        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug(f"Cache evict (LRU): {evicted[:12]}")

    def _purge_expired(self, now: datetime) -> None:
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._expirations += len(expired)


class NullCache(ScoringCache):
    """Cache that never stores anything; every call computes."""

    async def get_or_compute(self, fingerprint: str, compute: ComputeFn) -> ScoringResult:
        return await compute()

    def stats(self) -> CacheStats:
        return CacheStats(entries=0, in_flight=0, hits=0, misses=0, evictions=0, expirations=0)

    def clear(self) -> None:
        pass

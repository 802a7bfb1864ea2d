"""
Validation Cache — TTL store of document key → last ValidationResult.
Each entry also carries a content fingerprint so an edited document misses.

Entries expire lazily on read.  When the store grows past its ceiling, a
sweep drops expired entries first, then the oldest writes (FIFO) until the
ceiling holds again.  A lock guards every mutation so the cache can be
shared by validations running on worker threads.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable

from pydantic import BaseModel, ConfigDict

from precision_engine.models.results import CacheStats, ValidationResult

logger = logging.getLogger(__name__)


class CacheEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    result: ValidationResult
    cached_at_ms: float
    fingerprint: str = ""


class ValidationCache:
    """Time-to-live keyed store; never blocks callers beyond a short lock."""

    def __init__(
        self,
        ttl_ms: int = 300_000,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_ms = ttl_ms
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def _expired(self, entry: CacheEntry, now_ms: float) -> bool:
        return now_ms - entry.cached_at_ms > self.ttl_ms

    # ── Public API ───────────────────────────────────────

    def get(self, doc_id: str, fingerprint: str = "") -> ValidationResult | None:
        """Fresh result for ``doc_id``; a differing ``fingerprint`` counts as a miss."""
        with self._lock:
            entry = self._entries.get(doc_id)
            if entry is None:
                self.misses += 1
                return None
            if self._expired(entry, self._now_ms()):
                del self._entries[doc_id]
                self.misses += 1
                logger.debug(f"[CACHE] Expired entry evicted: {doc_id}")
                return None
            if fingerprint and entry.fingerprint != fingerprint:
                self.misses += 1
                logger.debug(f"[CACHE] Stale entry (document changed): {doc_id}")
                return None
            self.hits += 1
            return entry.result

    def put(self, doc_id: str, result: ValidationResult, fingerprint: str = "") -> None:
        with self._lock:
            # Re-insert so insertion order stays write order
            self._entries.pop(doc_id, None)
            self._entries[doc_id] = CacheEntry(result=result, cached_at_ms=self._now_ms(), fingerprint=fingerprint)
            if len(self._entries) > self.max_entries:
                self._sweep()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("[CACHE] Cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._entries

    def stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            hits=self.hits,
            misses=self.misses,
            evictions=self.evictions,
            ttl_ms=self.ttl_ms,
            max_entries=self.max_entries,
        )

    # ── Internals (caller holds the lock) ────────────────

    def _sweep(self) -> None:
        now_ms = self._now_ms()
        expired = [key for key, entry in self._entries.items() if self._expired(entry, now_ms)]
        for key in expired:
            del self._entries[key]

        dropped = 0
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            dropped += 1

        self.evictions += len(expired) + dropped
        logger.debug(
            f"[CACHE] Sweep removed {len(expired)} expired + {dropped} oldest "
            f"({len(self._entries)} remain)"
        )

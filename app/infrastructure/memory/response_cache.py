from __future__ import annotations

import hashlib
import json
import logging
import math
import threading
import time
from typing import Any, Callable, Generic, Mapping, TypeVar

from app.domain.entities import CacheEntry, CacheStats
from app.domain.errors import CacheFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_PREFIX = "ai_cache"
EVICTION_FRACTION = 0.2


def epoch_ms() -> float:
    return time.time() * 1000.0


def _normalize_input(value: Any) -> Any:
    if isinstance(value, str):
        return value.casefold().strip()
    return value


def _normalize_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    if not options:
        return {}
    return {k: options[k] for k in sorted(options)}


def fingerprint(
    endpoint: str, input: Any, options: Mapping[str, Any] | None = None
) -> str:
    """
    Deterministic cache key for an AI request.

    String input is case-folded and trimmed, option keys are sorted (nested
    mappings too, through sort_keys), and the canonical JSON is hashed with
    SHA-256. Raises CacheFailure if the request is not JSON-serializable or
    the options are not a mapping with sortable keys.
    """
    try:
        data = {
            "endpoint": endpoint,
            "input": _normalize_input(input),
            "options": _normalize_options(options),
        }
        canonical = json.dumps(
            data, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )
    except (TypeError, ValueError, LookupError) as e:
        raise CacheFailure(f"cannot fingerprint request for {endpoint}: {e}") from e
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{KEY_PREFIX}:{endpoint}:{digest}"


class ResponseCache(Generic[T]):
    """
    In-process TTL cache for AI responses, bounded to `max_size` entries.

    Expiry is lazy on reads; a full store is trimmed on insert by dropping
    expired entries and then the least-recently-accessed fifth. The cache is
    best-effort: get/set log internal errors instead of raising them.
    """

    def __init__(
        self,
        *,
        max_size: int = 1000,
        default_ttl_ms: int = 24 * 60 * 60 * 1000,
        clock: Callable[[], float] = epoch_ms,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock
        self._store: dict[str, CacheEntry[T]] = {}
        self._lock = threading.RLock()

    @staticmethod
    def fingerprint(
        endpoint: str, input: Any, options: Mapping[str, Any] | None = None
    ) -> str:
        return fingerprint(endpoint, input, options)

    def get(self, key: str) -> T | None:
        try:
            with self._lock:
                entry = self._store.get(key)
                if entry is None:
                    return None
                now = self._clock()
                if not entry.is_live(now):
                    del self._store[key]
                    return None
                entry.last_accessed_at = now
                return entry.payload
        except Exception:  # noqa: BLE001
            logger.exception("response cache lookup failed", extra={"key": key})
            return None

    def set(self, key: str, payload: T, ttl_ms: int | None = None) -> None:
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        try:
            with self._lock:
                now = self._clock()
                if ttl <= 0:
                    # already expired; keep any older value from being served
                    self._store.pop(key, None)
                    return
                if key not in self._store and len(self._store) >= self.max_size:
                    self._evict(now)
                self._store[key] = CacheEntry(
                    key=key,
                    payload=payload,
                    created_at=now,
                    last_accessed_at=now,
                    expires_at=now + ttl,
                )
        except Exception:  # noqa: BLE001
            logger.exception("response cache store failed", extra={"key": key})

    def contains(
        self, endpoint: str, input: Any, options: Mapping[str, Any] | None = None
    ) -> bool:
        """True if the request would be served from cache right now."""
        try:
            key = fingerprint(endpoint, input, options)
        except CacheFailure:
            return False
        with self._lock:
            entry = self._store.get(key)
            return entry is not None and entry.is_live(self._clock())

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def purge_expired(self) -> int:
        with self._lock:
            return self._sweep(self._clock())

    def stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            entries = list(self._store.values())
            created = [e.created_at for e in entries]
            return CacheStats(
                total_items=len(entries),
                max_size=self.max_size,
                expired_count=sum(1 for e in entries if not e.is_live(now)),
                oldest_created_at=min(created) if created else None,
                newest_created_at=max(created) if created else None,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def _sweep(self, now: float) -> int:
        expired = [k for k, e in self._store.items() if not e.is_live(now)]
        for k in expired:
            del self._store[k]
        return len(expired)

    def _evict(self, now: float) -> None:
        swept = self._sweep(now)
        evicted = 0
        if len(self._store) >= self.max_size:
            # sorted() is stable, so equal access times keep insertion order
            by_access = sorted(self._store.values(), key=lambda e: e.last_accessed_at)
            count = max(1, math.floor(len(by_access) * EVICTION_FRACTION))
            for entry in by_access[:count]:
                del self._store[entry.key]
            evicted = count
        logger.debug(
            "response cache eviction",
            extra={"expired": swept, "evicted": evicted, "size": len(self._store)},
        )

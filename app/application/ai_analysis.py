from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping

from app.domain.errors import CacheFailure
from app.infrastructure.memory.response_cache import ResponseCache

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000

TtlPolicy = Callable[[dict[str, Any]], int]


def _dynamic_ttl(data: dict[str, Any]) -> int:
    # confident analyses are stable enough to keep for a day
    confidence = (data.get("analysis") or {}).get("average_confidence")
    if isinstance(confidence, (int, float)) and confidence > 0.8:
        return 24 * HOUR_MS
    return 6 * HOUR_MS


TTL_POLICIES: dict[str, TtlPolicy] = {
    "short": lambda _data: 1 * HOUR_MS,
    "medium": lambda _data: 6 * HOUR_MS,
    "long": lambda _data: 24 * HOUR_MS,
    "very_long": lambda _data: 7 * 24 * HOUR_MS,
    "dynamic": _dynamic_ttl,
}


@dataclass(frozen=True)
class CachedAnalysis:
    data: dict[str, Any]
    cached: bool
    cache_key: str | None = None

    def meta(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"cached": self.cached}
        if self.cache_key:
            meta["cache_key"] = self.cache_key[:20] + "..."
        return meta


async def run_cached_analysis(
    cache: ResponseCache[dict[str, Any]],
    *,
    endpoint: str,
    input: Any,
    options: Mapping[str, Any] | None,
    compute: Callable[[], Awaitable[dict[str, Any]]],
    ttl_policy: TtlPolicy = TTL_POLICIES["long"],
) -> CachedAnalysis:
    """
    Serve an AI analysis from the response cache, computing and storing it on a miss.

    Cache problems never fail the request; they only cost a recomputation.
    Errors raised by `compute` propagate and nothing is cached.
    """
    try:
        key: str | None = cache.fingerprint(endpoint, input, options)
    except CacheFailure:
        logger.warning("cache bypassed", extra={"endpoint": endpoint}, exc_info=True)
        key = None

    if key is not None:
        hit = cache.get(key)
        if hit is not None:
            logger.info("cache hit", extra={"endpoint": endpoint})
            return CachedAnalysis(data=hit, cached=True, cache_key=key)
        logger.info("cache miss", extra={"endpoint": endpoint})

    data = await compute()

    if key is not None:
        ttl_ms = ttl_policy(data)
        cache.set(key, data, ttl_ms)
        logger.info(
            "cached analysis",
            extra={"endpoint": endpoint, "ttl_minutes": round(ttl_ms / 60000)},
        )
    return CachedAnalysis(data=data, cached=False, cache_key=key)

from __future__ import annotations

import asyncio
import logging
from typing import Any

from app.domain.passcode_manager import OneTimePasscodeManager
from app.infrastructure.memory.response_cache import ResponseCache

logger = logging.getLogger("app.infrastructure.maintenance.janitor")


class ExpiryJanitor:
    """
    Periodically removes expired passcodes and expired response-cache entries.

    Reads already ignore expired data; this only bounds how much of it piles up
    between reads.
    """

    def __init__(
        self,
        *,
        passcodes: OneTimePasscodeManager,
        cache: ResponseCache[Any],
        interval: float = 300.0,
    ) -> None:
        self.passcodes = passcodes
        self.cache = cache
        self.interval = interval

    async def run_forever(self) -> None:
        logger.info("expiry janitor started", extra={"interval": self.interval})
        while True:
            await self._process_once()
            await asyncio.sleep(self.interval)

    async def _process_once(self) -> dict[str, int]:
        """
        Single pass. A failing step is logged and skipped so the loop keeps going.
        Returns what each step removed (0 when it failed).
        """
        removed = {"passcodes": 0, "cache_entries": 0}
        try:
            removed["passcodes"] = await self.passcodes.cleanup_expired()
        except Exception:  # noqa: BLE001
            logger.exception("passcode cleanup failed")
        try:
            removed["cache_entries"] = self.cache.purge_expired()
        except Exception:  # noqa: BLE001
            logger.exception("cache purge failed")
        if any(removed.values()):
            logger.info("expiry janitor pass", extra=removed)
        return removed

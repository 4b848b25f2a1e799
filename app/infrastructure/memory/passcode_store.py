from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import replace
from datetime import datetime
from uuid import uuid4

from app.domain.entities import PasscodePurpose, PasscodeRecord, PurposeStats
from app.domain.ports.passcode_repository import PasscodeRepositoryPort


class InMemoryPasscodeRepository(PasscodeRepositoryPort):
    """
    Process-local passcode storage.

    Every method body runs under one lock and never awaits while holding it,
    so each call is atomic for both threads and interleaved coroutines.
    Callers get copies; the stored records only change through this class.
    """

    def __init__(self) -> None:
        self._records: dict[str, PasscodeRecord] = {}
        self._lock = threading.Lock()

    async def replace_active(self, record: PasscodeRecord) -> PasscodeRecord:
        with self._lock:
            for rec in self._records.values():
                if (
                    rec.email == record.email
                    and rec.purpose == record.purpose
                    and not rec.used
                ):
                    rec.used = True
            stored = replace(record, id=str(uuid4()), attempts=0, used=False)
            self._records[stored.id] = stored
            return replace(stored)

    async def find_active(
        self, email: str, purpose: PasscodePurpose
    ) -> PasscodeRecord | None:
        with self._lock:
            candidates = [
                rec
                for rec in self._records.values()
                if rec.email == email and rec.purpose == purpose and not rec.used
            ]
            if not candidates:
                return None
            newest = max(candidates, key=lambda rec: rec.created_at)
            return replace(newest)

    async def register_attempt(
        self, record_id: str, *, consume: bool, max_attempts: int
    ) -> PasscodeRecord | None:
        with self._lock:
            rec = self._records.get(record_id)
            if rec is None or rec.used or rec.attempts >= max_attempts:
                return None
            rec.attempts += 1
            if consume:
                rec.used = True
            return replace(rec)

    async def delete_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [rid for rid, rec in self._records.items() if rec.is_expired(now)]
            for rid in expired:
                del self._records[rid]
            return len(expired)

    async def stats(self, now: datetime) -> list[PurposeStats]:
        with self._lock:
            grouped: dict[PasscodePurpose, list[PasscodeRecord]] = defaultdict(list)
            for rec in self._records.values():
                grouped[rec.purpose].append(rec)
            return [
                PurposeStats(
                    purpose=purpose,
                    total=len(records),
                    used=sum(1 for r in records if r.used),
                    expired=sum(1 for r in records if r.is_expired(now)),
                )
                for purpose, records in sorted(
                    grouped.items(), key=lambda item: item[0].value
                )
            ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from app.domain.entities import PasscodePurpose, PasscodeRecord, PurposeStats


class PasscodeRepositoryPort(Protocol):
    async def replace_active(self, record: PasscodeRecord) -> PasscodeRecord:
        """
        Atomically mark every unused record for (record.email, record.purpose)
        as used and insert `record`. Returns the stored record (with its id).
        """

    async def find_active(
        self, email: str, purpose: PasscodePurpose
    ) -> PasscodeRecord | None:
        """Newest unused record for the slot, or None. Expiry is not checked here."""

    async def register_attempt(
        self, record_id: str, *, consume: bool, max_attempts: int
    ) -> PasscodeRecord | None:
        """
        Increment attempts (and set used=True when `consume`) only if the record
        is still unused and under `max_attempts`. Returns the updated record, or
        None when another caller got there first.
        """

    async def delete_expired(self, now: datetime) -> int:
        """Remove records with expires_at <= now; return how many were removed."""

    async def stats(self, now: datetime) -> list[PurposeStats]:
        """Counts of total / used / expired records grouped by purpose."""

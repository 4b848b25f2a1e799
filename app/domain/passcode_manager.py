from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

import app.domain.services as domain_services
from app.domain.entities import (
    IssuedPasscode,
    PasscodePurpose,
    PasscodeRecord,
    PurposeStats,
    VerifiedPasscode,
    normalize_email,
)
from app.domain.errors import InvalidOrExpiredCode, TooManyAttempts
from app.domain.ports.passcode_repository import PasscodeRepositoryPort

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OneTimePasscodeManager:
    """
    Issues and verifies short-lived numeric codes bound to (email, purpose).

    A slot holds at most one usable code: issuing replaces the previous one in
    a single repository call. Each verification attempt against a live code
    counts toward `max_attempts`, whether the code matched or not.
    """

    def __init__(
        self,
        repository: PasscodeRepositoryPort,
        *,
        code_length: int = 6,
        max_attempts: int = 5,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._repo = repository
        self.code_length = code_length
        self.max_attempts = max_attempts
        self._clock = clock

    async def issue(
        self, email: str, purpose: PasscodePurpose | str, ttl_minutes: int
    ) -> IssuedPasscode:
        if ttl_minutes <= 0:
            raise ValueError("ttl_minutes must be positive")

        code = domain_services.generate_numeric_code(self.code_length)
        salt_b64, digest_b64 = domain_services.make_code_digest(code)
        now = self._clock()
        record = PasscodeRecord(
            email=email,
            purpose=purpose,
            code_salt=salt_b64,
            code_digest=digest_b64,
            created_at=now,
            expires_at=now + timedelta(minutes=ttl_minutes),
        )
        stored = await self._repo.replace_active(record)
        logger.info(
            "passcode issued",
            extra={"purpose": stored.purpose.value, "ttl_minutes": ttl_minutes},
        )
        return IssuedPasscode(
            code=code, expires_at=stored.expires_at, expires_in_minutes=ttl_minutes
        )

    async def verify(
        self, email: str, code: str, purpose: PasscodePurpose | str
    ) -> VerifiedPasscode:
        slot_purpose = PasscodePurpose(purpose)
        record = await self._repo.find_active(normalize_email(email), slot_purpose)

        # no record, expired, wrong code: one indistinguishable error
        if record is None or record.is_expired(self._clock()):
            raise InvalidOrExpiredCode()
        if record.is_exhausted(self.max_attempts):
            raise TooManyAttempts()

        matched = domain_services.verify_code_digest(
            code, record.code_salt, record.code_digest
        )
        updated = await self._repo.register_attempt(
            record.id, consume=matched, max_attempts=self.max_attempts
        )
        if updated is None:
            # lost a race against a concurrent verify of the same code
            raise InvalidOrExpiredCode()
        if not matched:
            logger.info(
                "passcode mismatch",
                extra={"purpose": slot_purpose.value, "attempts": updated.attempts},
            )
            raise InvalidOrExpiredCode()

        return VerifiedPasscode(email=updated.email, purpose=updated.purpose)

    async def cleanup_expired(self) -> int:
        removed = await self._repo.delete_expired(self._clock())
        if removed:
            logger.info("expired passcodes removed", extra={"count": removed})
        return removed

    async def stats(self) -> list[PurposeStats]:
        return await self._repo.stats(self._clock())

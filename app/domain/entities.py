from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class PasscodePurpose(str, Enum):
    PASSWORD_RESET = "password_reset"
    EMAIL_VERIFICATION = "email_verification"


@dataclass
class CacheEntry(Generic[T]):
    key: str
    payload: T
    created_at: float
    last_accessed_at: float
    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class CacheStats:
    total_items: int
    max_size: int
    expired_count: int
    oldest_created_at: float | None
    newest_created_at: float | None


@dataclass
class PasscodeRecord:
    email: str
    purpose: PasscodePurpose
    code_salt: str
    code_digest: str
    expires_at: datetime
    created_at: datetime
    attempts: int = 0
    used: bool = False
    id: str | None = None

    def __post_init__(self):
        self.email = normalize_email(self.email)
        if not self.email:
            raise ValueError("email is required")
        self.purpose = PasscodePurpose(self.purpose)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_exhausted(self, max_attempts: int) -> bool:
        return self.attempts >= max_attempts


@dataclass(frozen=True)
class IssuedPasscode:
    code: str
    expires_at: datetime
    expires_in_minutes: int


@dataclass(frozen=True)
class VerifiedPasscode:
    email: str
    purpose: PasscodePurpose


@dataclass(frozen=True)
class PurposeStats:
    purpose: PasscodePurpose
    total: int
    used: int
    expired: int


@dataclass
class User:
    id: str | None = None
    email: str | None = None
    username: str | None = None

    def __post_init__(self):
        if self.email:
            self.email = normalize_email(self.email)
            if not self.email:
                raise ValueError("email cannot be empty")
        else:
            raise ValueError("email is required")

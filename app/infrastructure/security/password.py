from __future__ import annotations

from passlib.context import CryptContext

from app.settings import get_settings

# one context per process; bcrypt only
_pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str, *, rounds: int | None = None) -> str:
    """
    Hash a password with bcrypt. If rounds is None, use settings.bcrypt_rounds.
    """
    if rounds is None:
        rounds = int(get_settings().bcrypt_rounds)
    return _pwd.hash(plain, rounds=rounds)

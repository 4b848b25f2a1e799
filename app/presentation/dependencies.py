from typing import Annotated, Any, Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from app.domain.errors import ConfigurationMissing
from app.domain.passcode_manager import OneTimePasscodeManager
from app.domain.ports.content_generator import ContentGeneratorPort
from app.domain.ports.email_port import EmailPort
from app.domain.ports.passcode_repository import PasscodeRepositoryPort
from app.domain.ports.reset_tokens import ResetTokenStorePort
from app.domain.ports.unit_of_work import UnitOfWorkPort
from app.domain.services import secure_compare
from app.infrastructure.ai.placeholder_generator import PlaceholderContentGenerator
from app.infrastructure.db.passcodes_repo import PgPasscodeRepository
from app.infrastructure.db.pool import get_pool
from app.infrastructure.db.uow import PgUnitOfWork
from app.infrastructure.memory.passcode_store import InMemoryPasscodeRepository
from app.infrastructure.memory.response_cache import ResponseCache
from app.infrastructure.redis_cache.client import get_redis
from app.infrastructure.redis_cache.reset_tokens import RedisResetTokens
from app.infrastructure.security.password import hash_password
from app.settings import Settings, get_settings


def build_passcode_repository(settings: Settings) -> PasscodeRepositoryPort:
    backend = settings.passcode_backend.strip().lower()
    if backend == "memory":
        return InMemoryPasscodeRepository()
    if backend == "postgres":
        return PgPasscodeRepository(get_pool())
    raise ConfigurationMissing(f"unknown passcode backend: {settings.passcode_backend!r}")


def build_passcode_manager(settings: Settings) -> OneTimePasscodeManager:
    return OneTimePasscodeManager(
        build_passcode_repository(settings),
        code_length=settings.otp_length,
        max_attempts=settings.otp_max_attempts,
    )


def get_uow() -> UnitOfWorkPort:
    return PgUnitOfWork(get_pool())


def get_response_cache(request: Request) -> ResponseCache[Any]:
    # built once in app.main.create_app()
    return request.app.state.response_cache


def get_passcode_manager(request: Request) -> OneTimePasscodeManager:
    return request.app.state.passcodes


def get_mailer(request: Request) -> Optional[EmailPort]:
    # set in app.main lifespan() when SMTP_BASE_URL is configured
    return getattr(request.app.state, "mailer", None)


def get_reset_tokens() -> ResetTokenStorePort:
    return RedisResetTokens(
        get_redis(), ttl_seconds=get_settings().reset_token_ttl_seconds
    )


def get_content_generator() -> ContentGeneratorPort:
    return PlaceholderContentGenerator()


def get_hash_password() -> Callable[..., str]:
    return hash_password


def get_code_ttl_minutes() -> int:
    return get_settings().otp_ttl_minutes


def get_admin_token() -> str:
    return get_settings().admin_token


def require_admin(
    admin_token: Annotated[str, Depends(get_admin_token)],
    x_admin_token: Annotated[Optional[str], Header()] = None,
) -> None:
    # maintenance routes stay closed until ADMIN_TOKEN is set
    if not admin_token or not x_admin_token:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
    if not secure_compare(x_admin_token, admin_token):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")

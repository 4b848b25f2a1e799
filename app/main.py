import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from app.infrastructure.db.pool import close_pool, get_pool
from app.infrastructure.email.http_mailer import HttpMailRelay
from app.infrastructure.maintenance.janitor import ExpiryJanitor
from app.infrastructure.memory.response_cache import ResponseCache
from app.infrastructure.redis_cache.client import close_redis, get_redis
from app.logging import setup_logging
from app.presentation.api import api
from app.presentation.dependencies import build_passcode_manager
from app.presentation.routes.health import router as health_router
from app.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    pool = get_pool()
    if getattr(pool, "closed", True):
        await pool.open()

    get_redis()

    mailer = None
    if settings.smtp_base_url:
        mailer = HttpMailRelay(base_url=settings.smtp_base_url)
    else:
        logger.warning("SMTP_BASE_URL not set; password reset is disabled")
    app.state.mailer = mailer  # read by presentation.dependencies.get_mailer

    janitor = ExpiryJanitor(
        passcodes=app.state.passcodes,
        cache=app.state.response_cache,
        interval=settings.janitor_interval_seconds,
    )
    janitor_task = asyncio.create_task(janitor.run_forever())

    try:
        yield
    finally:
        # shutdown
        janitor_task.cancel()
        with suppress(asyncio.CancelledError):
            await janitor_task
        if mailer is not None:
            await mailer.aclose()
        await close_redis()
        await close_pool()


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title="Argument Graph API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    # process-wide singletons, handed to handlers through dependencies
    app.state.response_cache = ResponseCache(
        max_size=settings.cache_max_size,
        default_ttl_ms=settings.cache_default_ttl_ms,
    )
    app.state.passcodes = build_passcode_manager(settings)
    app.include_router(health_router)
    app.include_router(api)
    return app


app = create_app()

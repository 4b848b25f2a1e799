import pytest
from fastapi.testclient import TestClient

from app.domain.passcode_manager import OneTimePasscodeManager
from app.infrastructure.memory.passcode_store import InMemoryPasscodeRepository
from app.infrastructure.memory.response_cache import ResponseCache
from app.main import create_app
from app.presentation.dependencies import (
    get_admin_token,
    get_code_ttl_minutes,
    get_content_generator,
    get_hash_password,
    get_mailer,
    get_passcode_manager,
    get_reset_tokens,
    get_response_cache,
    get_uow,
)
from tests.fakes import (
    FakeClock,
    FakeContentGenerator,
    FakeEmailOK,
    FakeMsClock,
    FakeResetTokens,
    FakeUoW,
)

ADMIN_TOKEN = "admin-s3cret"


class Deps:
    """Everything the routes talk to, swapped for in-memory fakes."""

    def __init__(self) -> None:
        self.uow = FakeUoW()
        self.clock = FakeClock()
        self.passcode_repo = InMemoryPasscodeRepository()
        self.passcodes = OneTimePasscodeManager(self.passcode_repo, clock=self.clock)
        self.mailer = FakeEmailOK()
        self.reset_tokens = FakeResetTokens()
        self.ms_clock = FakeMsClock()
        self.cache = ResponseCache(
            max_size=50, default_ttl_ms=60_000, clock=self.ms_clock
        )
        self.generator = FakeContentGenerator()


@pytest.fixture()
def app_and_deps():
    app = create_app()
    deps = Deps()

    app.dependency_overrides[get_uow] = lambda: deps.uow
    app.dependency_overrides[get_passcode_manager] = lambda: deps.passcodes
    app.dependency_overrides[get_mailer] = lambda: deps.mailer
    app.dependency_overrides[get_reset_tokens] = lambda: deps.reset_tokens
    app.dependency_overrides[get_hash_password] = lambda: (
        lambda plain: "hashed-" + plain
    )
    app.dependency_overrides[get_code_ttl_minutes] = lambda: 10
    app.dependency_overrides[get_response_cache] = lambda: deps.cache
    app.dependency_overrides[get_content_generator] = lambda: deps.generator
    app.dependency_overrides[get_admin_token] = lambda: ADMIN_TOKEN

    try:
        yield app, deps
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def deps(app_and_deps) -> Deps:
    return app_and_deps[1]


@pytest.fixture()
def client(app_and_deps):
    app, _ = app_and_deps
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Token": ADMIN_TOKEN}

import pytest

from app.domain.passcode_manager import OneTimePasscodeManager
from app.infrastructure.memory.passcode_store import InMemoryPasscodeRepository
from app.infrastructure.memory.response_cache import ResponseCache
from tests.fakes import (
    FakeClock,
    FakeEmailOK,
    FakeMsClock,
    FakeResetTokens,
    FakeUoW,
)


@pytest.fixture()
def uow():
    return FakeUoW()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def ms_clock():
    return FakeMsClock()


@pytest.fixture()
def passcode_repo():
    return InMemoryPasscodeRepository()


@pytest.fixture()
def passcodes(passcode_repo, clock):
    return OneTimePasscodeManager(passcode_repo, clock=clock)


@pytest.fixture()
def response_cache(ms_clock):
    return ResponseCache(max_size=10, default_ttl_ms=60_000, clock=ms_clock)


@pytest.fixture()
def mailer():
    return FakeEmailOK()


@pytest.fixture()
def reset_tokens():
    return FakeResetTokens()


@pytest.fixture()
def hash_password_stub():
    return lambda p: "hashed-" + p


@pytest.fixture()
def fixed_code(monkeypatch):
    """
    Make generated passcodes deterministic ("123456") for a test.
    Re-monkeypatch inside the test for a different value.
    """
    from app.domain import services as domain_services

    monkeypatch.setattr(
        domain_services, "generate_numeric_code", lambda length=6: "123456"[:length]
    )
    return "123456"

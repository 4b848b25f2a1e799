from datetime import datetime, timedelta, timezone

import pytest

from app.domain.entities import PasscodePurpose, PasscodeRecord
from app.infrastructure.memory.passcode_store import InMemoryPasscodeRepository

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
RESET = PasscodePurpose.PASSWORD_RESET


def make_record(email="a@x.com", purpose=RESET, minutes=10, created=NOW):
    return PasscodeRecord(
        email=email,
        purpose=purpose,
        code_salt="c2FsdA==",
        code_digest="ZGlnZXN0",
        created_at=created,
        expires_at=created + timedelta(minutes=minutes),
    )


@pytest.mark.asyncio
async def test_replace_active_assigns_id_and_resets_counters():
    repo = InMemoryPasscodeRepository()
    rec = make_record()
    rec.attempts = 3
    rec.used = True

    stored = await repo.replace_active(rec)

    assert stored.id
    assert stored.attempts == 0
    assert stored.used is False


@pytest.mark.asyncio
async def test_replace_active_marks_previous_as_used():
    repo = InMemoryPasscodeRepository()
    first = await repo.replace_active(make_record())
    second = await repo.replace_active(make_record(created=NOW + timedelta(seconds=1)))

    active = await repo.find_active("a@x.com", RESET)
    assert active.id == second.id
    assert repo._records[first.id].used is True


@pytest.mark.asyncio
async def test_find_active_returns_copy():
    repo = InMemoryPasscodeRepository()
    stored = await repo.replace_active(make_record())

    found = await repo.find_active("a@x.com", RESET)
    found.attempts = 99

    assert repo._records[stored.id].attempts == 0


@pytest.mark.asyncio
async def test_register_attempt_respects_limit_and_used_flag():
    repo = InMemoryPasscodeRepository()
    stored = await repo.replace_active(make_record())

    one = await repo.register_attempt(stored.id, consume=False, max_attempts=2)
    two = await repo.register_attempt(stored.id, consume=False, max_attempts=2)
    three = await repo.register_attempt(stored.id, consume=True, max_attempts=2)

    assert (one.attempts, two.attempts) == (1, 2)
    assert three is None


@pytest.mark.asyncio
async def test_register_attempt_consume_is_single_use():
    repo = InMemoryPasscodeRepository()
    stored = await repo.replace_active(make_record())

    won = await repo.register_attempt(stored.id, consume=True, max_attempts=5)
    lost = await repo.register_attempt(stored.id, consume=True, max_attempts=5)

    assert won.used is True
    assert lost is None
    assert await repo.find_active("a@x.com", RESET) is None


@pytest.mark.asyncio
async def test_register_attempt_unknown_id():
    repo = InMemoryPasscodeRepository()
    assert await repo.register_attempt("missing", consume=True, max_attempts=5) is None


@pytest.mark.asyncio
async def test_delete_expired_only_removes_expired():
    repo = InMemoryPasscodeRepository()
    await repo.replace_active(make_record(email="a@x.com", minutes=1))
    await repo.replace_active(make_record(email="b@x.com", minutes=60))

    removed = await repo.delete_expired(NOW + timedelta(minutes=5))

    assert removed == 1
    assert len(repo) == 1
    assert await repo.find_active("b@x.com", RESET) is not None

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Protocol, Type

from app.domain.ports.user_repository import UserRepositoryPort


@dataclass
class UnitOfWorkPort(Protocol):
    """
    One database transaction around the user repository.

        async with uow as tx:
            user = await tx.db_users.get_by_email(email)
            await tx.db_users.set_password_hash(user.id, pwd_hash)
            await tx.commit()

    Leaving the block without commit() rolls back.
    """

    db_users: UserRepositoryPort

    async def __aenter__(self) -> "UnitOfWorkPort": ...

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

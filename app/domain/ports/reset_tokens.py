from typing import Protocol


class ResetTokenStorePort(Protocol):
    async def create(self, email: str) -> str:
        """Mint a single-use reset token bound to `email`."""

    async def consume(self, token: str) -> str | None:
        """Return the bound email and delete the token, or None if unknown/expired."""

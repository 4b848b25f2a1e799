from __future__ import annotations

import logging
from typing import Callable, Optional

from app.domain.entities import PasscodePurpose, normalize_email
from app.domain.errors import EmailServiceUnavailable, InvalidResetToken, UserNotFound
from app.domain.passcode_manager import OneTimePasscodeManager
from app.domain.ports.email_port import EmailPort
from app.domain.ports.reset_tokens import ResetTokenStorePort
from app.domain.ports.unit_of_work import UnitOfWorkPort
from app.infrastructure.email import templates

logger = logging.getLogger(__name__)


async def request_password_reset(
    uow: UnitOfWorkPort,
    passcodes: OneTimePasscodeManager,
    mailer: Optional[EmailPort],
    email: str,
    code_ttl_minutes: int = 10,
) -> bool:
    """
    Issue and mail a reset code. Returns False, without issuing anything, when
    no account matches; callers must answer both cases the same way.
    """
    if mailer is None:
        raise EmailServiceUnavailable("password reset is not available")

    normalized_email = normalize_email(email)
    async with uow as transaction:
        user = await transaction.db_users.get_by_email(normalized_email)
    if user is None:
        return False

    issued = await passcodes.issue(
        normalized_email, PasscodePurpose.PASSWORD_RESET, code_ttl_minutes
    )
    message = templates.passcode_email(issued.code, issued.expires_in_minutes)
    await mailer.send(
        to=normalized_email,
        subject=message.subject,
        body=message.body,
        html=message.html,
    )
    return True


async def verify_reset_code(
    passcodes: OneTimePasscodeManager,
    reset_tokens: ResetTokenStorePort,
    email: str,
    code: str,
) -> str:
    """Trade a valid reset code for a single-use reset token."""
    verified = await passcodes.verify(email, code, PasscodePurpose.PASSWORD_RESET)
    return await reset_tokens.create(verified.email)


async def reset_password(
    uow: UnitOfWorkPort,
    reset_tokens: ResetTokenStorePort,
    mailer: Optional[EmailPort],
    token: str,
    new_password: str,
    hash_password: Callable[..., str],
) -> str:
    email = await reset_tokens.consume(token)
    if not email:
        raise InvalidResetToken("invalid or expired reset token")

    hashed_password = hash_password(new_password)
    async with uow as transaction:
        user = await transaction.db_users.get_by_email(email)
        if user is None:
            raise UserNotFound()
        await transaction.db_users.set_password_hash(user.id, hashed_password)
        await transaction.commit()

    if mailer is not None:
        message = templates.password_reset_success_email()
        try:
            await mailer.send(
                to=email, subject=message.subject, body=message.body, html=message.html
            )
        except RuntimeError:
            # password already changed; the notice is best-effort
            logger.warning("reset confirmation email failed", exc_info=True)
    return email


async def deliver_password_reset(
    uow: UnitOfWorkPort,
    passcodes: OneTimePasscodeManager,
    mailer: EmailPort,
    email: str,
    code_ttl_minutes: int = 10,
) -> None:
    """
    request_password_reset() for a background task, after the response went out.

    Known and unknown emails then answer equally fast. Relay failures are
    logged; the user can ask for a new code.
    """
    try:
        await request_password_reset(
            uow=uow,
            passcodes=passcodes,
            mailer=mailer,
            email=email,
            code_ttl_minutes=code_ttl_minutes,
        )
    except RuntimeError:
        logger.warning("password reset email failed", exc_info=True)

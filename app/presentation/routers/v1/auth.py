from typing import Annotated, Callable, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from app.application.password_reset import (
    deliver_password_reset,
    reset_password,
    verify_reset_code,
)
from app.domain.errors import (
    InvalidOrExpiredCode,
    InvalidResetToken,
    TooManyAttempts,
    UserNotFound,
)
from app.domain.passcode_manager import OneTimePasscodeManager
from app.domain.ports.email_port import EmailPort
from app.domain.ports.reset_tokens import ResetTokenStorePort
from app.domain.ports.unit_of_work import UnitOfWorkPort
from app.presentation.dependencies import (
    get_code_ttl_minutes,
    get_hash_password,
    get_mailer,
    get_passcode_manager,
    get_reset_tokens,
    get_uow,
)
from app.schemas.requests import ForgotPasswordIn, ResetPasswordIn, VerifyResetCodeIn
from app.schemas.responses import (
    ForgotPasswordOut,
    ResetPasswordOut,
    VerifyResetCodeOut,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/forgot-password", response_model=ForgotPasswordOut)
async def post_forgot_password(
    body: ForgotPasswordIn,
    background_tasks: BackgroundTasks,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    passcodes: Annotated[OneTimePasscodeManager, Depends(get_passcode_manager)],
    mailer: Annotated[Optional[EmailPort], Depends(get_mailer)],
    code_ttl_minutes: Annotated[int, Depends(get_code_ttl_minutes)],
):
    if mailer is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="email service is not configured; password reset is unavailable",
        )
    # lookup, issue and send run after the response, so timing says nothing
    # about whether the account exists
    background_tasks.add_task(
        deliver_password_reset,
        uow=uow,
        passcodes=passcodes,
        mailer=mailer,
        email=body.email,
        code_ttl_minutes=code_ttl_minutes,
    )
    return ForgotPasswordOut(expires_in_minutes=code_ttl_minutes)


@router.post("/verify-reset-otp", response_model=VerifyResetCodeOut)
async def post_verify_reset_code(
    body: VerifyResetCodeIn,
    passcodes: Annotated[OneTimePasscodeManager, Depends(get_passcode_manager)],
    reset_tokens: Annotated[ResetTokenStorePort, Depends(get_reset_tokens)],
):
    try:
        token = await verify_reset_code(
            passcodes=passcodes,
            reset_tokens=reset_tokens,
            email=body.email,
            code=body.code,
        )
    except TooManyAttempts as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(e))
    except InvalidOrExpiredCode as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return VerifyResetCodeOut(reset_token=token, email=body.email.strip().lower())


@router.post("/reset-password", response_model=ResetPasswordOut)
async def post_reset_password(
    body: ResetPasswordIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    reset_tokens: Annotated[ResetTokenStorePort, Depends(get_reset_tokens)],
    mailer: Annotated[Optional[EmailPort], Depends(get_mailer)],
    hash_password: Annotated[Callable[..., str], Depends(get_hash_password)],
):
    try:
        email = await reset_password(
            uow=uow,
            reset_tokens=reset_tokens,
            mailer=mailer,
            token=body.reset_token,
            new_password=body.new_password,
            hash_password=hash_password,
        )
    except InvalidResetToken:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid or expired reset token",
        )
    except UserNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    return ResetPasswordOut(email=email)

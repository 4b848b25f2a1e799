from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class OkOut(BaseModel):
    status: Literal["ok"] = "ok"


class ForgotPasswordOut(BaseModel):
    message: str = (
        "If an account with this email exists, you will receive a password reset code."
    )
    expires_in_minutes: int


class VerifyResetCodeOut(BaseModel):
    message: str = "Code verified. You can now reset your password."
    reset_token: str
    email: str


class ResetPasswordOut(BaseModel):
    message: str = "Password has been reset. You can now log in with your new password."
    email: str


class AnalysisOut(BaseModel):
    success: bool = True
    data: dict[str, Any]
    meta: dict[str, Any] = Field(default_factory=dict)


class CacheStatsOut(BaseModel):
    total_items: int
    max_size: int
    expired_count: int
    oldest_created_at: Optional[float] = None
    newest_created_at: Optional[float] = None


class PasscodeStatsOut(BaseModel):
    purpose: str
    total: int
    used: int
    expired: int


class CleanupOut(BaseModel):
    removed: int

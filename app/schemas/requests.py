from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field


class ForgotPasswordIn(BaseModel):
    email: EmailStr = Field(..., description="Account email", max_length=255)


class VerifyResetCodeIn(BaseModel):
    email: EmailStr = Field(..., description="Account email", max_length=255)
    code: str = Field(..., min_length=4, max_length=10, pattern=r"^\d+$")


class ResetPasswordIn(BaseModel):
    reset_token: str = Field(..., min_length=1, max_length=256)
    new_password: str = Field(..., min_length=8, max_length=128)


class TextIn(BaseModel):
    text: str = Field(..., description="Text to analyse")


class SummarizeIn(BaseModel):
    content: str
    max_length: int = Field(200, ge=1, le=2000)
    style: Literal["brief", "detailed", "bullet_points"] = "brief"


class SuggestCounterIn(BaseModel):
    argument: str
    context: Optional[str] = None
    max_suggestions: int = Field(3, ge=1, le=10)


class ArgumentIn(BaseModel):
    argument: str

from __future__ import annotations

from dataclasses import dataclass
from html import escape

APP_NAME = "Argument Graph"


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    body: str
    html: str


def passcode_email(code: str, expires_in_minutes: int) -> EmailMessage:
    body = (
        f"You asked to reset your {APP_NAME} password.\n\n"
        f"Your one-time code is: {code}\n\n"
        f"It is valid for {expires_in_minutes} minutes and can be used once.\n"
        "If you did not ask for this, ignore this email; your password is unchanged."
    )
    html = (
        f"<p>You asked to reset your {APP_NAME} password.</p>"
        f'<p style="font-size:32px;font-weight:bold;letter-spacing:4px">{escape(code)}</p>'
        f"<ul><li>This code is valid for {expires_in_minutes} minutes only</li>"
        "<li>It can be used once</li>"
        "<li>Never share it with anyone</li></ul>"
    )
    return EmailMessage(
        subject=f"Password Reset Code - {APP_NAME}", body=body, html=html
    )


def password_reset_success_email() -> EmailMessage:
    body = (
        f"Your {APP_NAME} password was changed.\n\n"
        "If this was not you, contact support immediately."
    )
    html = (
        f"<p>Your {APP_NAME} password was changed.</p>"
        "<p>If this was not you, contact support immediately.</p>"
    )
    return EmailMessage(
        subject=f"Password Reset Successful - {APP_NAME}", body=body, html=html
    )

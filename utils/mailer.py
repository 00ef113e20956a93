"""Outbound mail for password resets."""

from __future__ import annotations

from flask import current_app, render_template_string
from flask_mail import Mail, Message

mail = Mail()

RESET_SUBJECT = "Password Reset"

reset_text_template = """You requested a password reset.

Send a PUT request with your new password to:

{{ reset_url }}

The link expires in one hour. If you did not ask for this, ignore this email.
"""

reset_html_template = """<!DOCTYPE html>
<html lang="en">
<body>
    <p>You requested a password reset.</p>
    <p>Send a PUT request with your new password to:</p>
    <p><a href="{{ reset_url }}">{{ reset_url }}</a></p>
    <p>The link expires in one hour. If you did not ask for this, ignore this email.</p>
</body>
</html>
"""


def build_reset_url(token: str) -> str:
    base = current_app.config.get("RESET_PASSWORD_URL", "")
    return f"{base.rstrip('/')}/{token}"


def send_password_reset_email(recipient: str, token: str) -> None:
    """Send the reset link; delivery errors propagate to the caller."""

    reset_url = build_reset_url(token)
    msg = Message(
        RESET_SUBJECT,
        sender=current_app.config.get("MAIL_DEFAULT_SENDER"),
        recipients=[recipient],
    )
    msg.body = render_template_string(reset_text_template, reset_url=reset_url)
    msg.html = render_template_string(reset_html_template, reset_url=reset_url)
    mail.send(msg)

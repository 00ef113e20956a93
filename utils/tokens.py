"""Session and password-reset token helpers."""

from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta

from flask import Response, current_app
from flask_jwt_extended import create_access_token, set_access_cookies

from models.user import User, utcnow

RESET_TOKEN_BYTES = 32
RESET_TOKEN_TTL = timedelta(hours=1)


def issue_session_token(user: User, expires_delta: timedelta) -> str:
    """Return a signed JWT carrying the user's id, role and token version."""

    return create_access_token(
        identity=str(user.id),
        additional_claims={
            "id": user.id,
            "role": user.role,
            "ver": user.token_version or 0,
        },
        expires_delta=expires_delta,
    )


def set_session_cookie(response: Response, token: str, expires_delta: timedelta) -> None:
    """Attach the token as the session cookie; it lives exactly as long as the token."""

    set_access_cookies(response, token, max_age=int(expires_delta.total_seconds()))


def login_token_lifetime() -> timedelta:
    return current_app.config["JWT_ACCESS_TOKEN_EXPIRES"]


def register_token_lifetime() -> timedelta:
    return current_app.config["REGISTER_TOKEN_EXPIRES"]


def hash_reset_token(token: str) -> str:
    """One-way digest stored in place of the mailed reset token."""

    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token() -> tuple[str, str, datetime]:
    """Return ``(plaintext, digest, expires_at)`` for a new password reset."""

    token = secrets.token_hex(RESET_TOKEN_BYTES)
    return token, hash_reset_token(token), utcnow() + RESET_TOKEN_TTL

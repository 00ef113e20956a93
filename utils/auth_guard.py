"""Request guards built on flask-jwt-extended.

``jwt_required()`` performs the authentication check: it reads the bearer
token from the ``Authorization`` header, falling back to the ``token`` cookie.
``admin_required`` performs the authorization check and must be stacked below
``jwt_required()`` so the decoded claims are already in the request context.
"""

from __future__ import annotations

from functools import wraps
from http import HTTPStatus

from flask import current_app
from flask_jwt_extended import JWTManager, get_jwt
from werkzeug.exceptions import Forbidden

from models import db
from models.user import User
from utils.errors import json_error

INVALID_TOKEN_DETAIL = "Invalid token."


def current_claims() -> dict:
    """Return the ``{id, role}`` pair attached by the authentication check."""

    claims = get_jwt()
    return {"id": claims.get("id"), "role": claims.get("role")}


def admin_required(fn):
    """Reject callers whose verified role claim is not ``admin``."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_claims()["role"] != "admin":
            raise Forbidden("Access denied.")
        return fn(*args, **kwargs)

    return wrapper


def is_token_stale(jwt_payload: dict) -> bool:
    """A token is stale once its user's token version was superseded.

    Tokens of deleted users still verify; handlers that load the caller
    answer those with 404.
    """

    user_id = jwt_payload.get("id")
    if user_id is None:
        return True
    user = db.session.get(User, user_id)
    if user is None:
        return False
    return (user.token_version or 0) != jwt_payload.get("ver", 0)


def register_jwt_callbacks(jwt: JWTManager) -> None:
    """Map every token failure onto the shared JSON error shape."""

    @jwt.token_in_blocklist_loader
    def _check_token_version(_jwt_header, jwt_payload):
        return is_token_stale(jwt_payload)

    @jwt.unauthorized_loader
    def _missing_token(reason):
        current_app.logger.debug("Rejected request without token: %s", reason)
        return json_error(HTTPStatus.UNAUTHORIZED, "Unauthorized", "No token provided.")

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        current_app.logger.debug("Rejected malformed token: %s", reason)
        return json_error(HTTPStatus.UNAUTHORIZED, "Unauthorized", INVALID_TOKEN_DETAIL)

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_payload):
        return json_error(HTTPStatus.UNAUTHORIZED, "Unauthorized", INVALID_TOKEN_DETAIL)

    @jwt.revoked_token_loader
    def _stale_token(_jwt_header, _jwt_payload):
        return json_error(HTTPStatus.UNAUTHORIZED, "Unauthorized", INVALID_TOKEN_DETAIL)

"""Authentication blueprint: registration, login, session checks and password resets."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt, unset_jwt_cookies, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy import or_
from werkzeug.exceptions import BadRequest, Conflict, InternalServerError, NotFound

from models import db
from models.user import USER_ROLES, User, utcnow
from utils.mailer import send_password_reset_email
from utils.persistence import commit_or_abort
from utils.request_validation import parse_request_body
from utils.tokens import (
    generate_reset_token,
    hash_reset_token,
    issue_session_token,
    login_token_lifetime,
    register_token_lifetime,
    set_session_cookie,
)

auth_bp = Blueprint("auth", __name__)

DUPLICATE_USER_DETAIL = "A user with that email or phone already exists."
SESSION_CLAIMS = ("id", "role", "exp", "iat")


def _normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


def _find_by_identifier(identifier: str) -> User | None:
    """Match on email first, then phone."""
    user = User.query.filter_by(email=_normalize_email(identifier)).first()
    if user is None:
        user = User.query.filter_by(phone=identifier).first()
    return user


@auth_bp.route("/register", methods=["POST"])
def register():
    """Create an account and start a session for it.

    The caller picks the role, so open registration can mint admins.
    """

    payload = parse_request_body(
        request, required_keys=("name", "email", "phone", "password", "role")
    )
    email = _normalize_email(payload["email"])
    phone = payload["phone"]
    role = payload["role"].lower()
    if role not in USER_ROLES:
        raise BadRequest("Role must be one of: user, admin.")

    existing = User.query.filter(or_(User.email == email, User.phone == phone)).first()
    if existing is not None:
        raise Conflict(DUPLICATE_USER_DETAIL)

    user = User(name=payload["name"], email=email, phone=phone, role=role)
    user.set_password(payload["password"])
    db.session.add(user)
    commit_or_abort("Registration failed.", conflict_detail=DUPLICATE_USER_DETAIL)
    current_app.logger.info("Registered user %s with role %s", user.id, user.role)

    lifetime = register_token_lifetime()
    token = issue_session_token(user, lifetime)
    response = jsonify(
        {
            "message": "Registration successful.",
            "token": token,
            "user": user.to_dict(),
        }
    )
    response.status_code = HTTPStatus.CREATED
    set_session_cookie(response, token, lifetime)
    return response


@auth_bp.route("/login", methods=["POST"])
def login():
    """Authenticate by email or phone and return a session token."""

    payload = parse_request_body(request, required_keys=("identifier", "password"))

    user = _find_by_identifier(payload["identifier"])
    if user is None:
        raise NotFound("Email or phone number is not registered.")

    if not user.check_password(payload["password"]):
        current_app.logger.warning("Failed login for user %s", user.id)
        raise BadRequest("Incorrect password.")

    lifetime = login_token_lifetime()
    token = issue_session_token(user, lifetime)
    current_app.logger.info("User %s logged in", user.id)

    response = jsonify(
        {"message": "Login successful.", "token": token, "user": user.to_dict()}
    )
    set_session_cookie(response, token, lifetime)
    return response


@auth_bp.route("/check-auth", methods=["GET"])
def check_auth():
    """Report whether the session cookie carries a valid token."""

    try:
        verify_jwt_in_request(optional=True, locations=["cookies"])
    except (JWTExtendedException, PyJWTError):
        return jsonify({"isAuthenticated": False}), HTTPStatus.UNAUTHORIZED

    claims = get_jwt()
    if not claims:
        return jsonify({"isAuthenticated": False}), HTTPStatus.OK

    return (
        jsonify(
            {
                "isAuthenticated": True,
                "user": {key: claims.get(key) for key in SESSION_CLAIMS},
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """Expire the session cookie on the client."""

    response = jsonify({"message": "Logged out successfully."})
    unset_jwt_cookies(response)
    return response


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    """Store a hashed reset token and mail the plaintext link to the user."""

    payload = parse_request_body(request, required_keys=("email",))

    user = User.query.filter_by(email=_normalize_email(payload["email"])).first()
    if user is None:
        raise NotFound("User not found.")

    token, token_hash, expires_at = generate_reset_token()
    user.start_password_reset(token_hash, expires_at)
    commit_or_abort("Password reset could not be started.")

    try:
        send_password_reset_email(user.email, token)
    except Exception as error:
        current_app.logger.exception("Password reset email to user %s failed", user.id)
        raise InternalServerError("Password reset could not be started.") from error

    current_app.logger.info("Password reset requested for user %s", user.id)
    return jsonify({"message": "Password reset email sent."}), HTTPStatus.OK


@auth_bp.route("/reset-password/<token>", methods=["PUT"])
def reset_password(token: str):
    """Consume a mailed reset token and set a new password."""

    payload = parse_request_body(request, required_keys=("password",))

    user = User.query.filter(
        User.reset_password_token == hash_reset_token(token),
        User.reset_password_expire > utcnow(),
    ).first()
    if user is None:
        raise BadRequest("Invalid or expired reset token.")

    user.complete_password_reset(payload["password"])
    commit_or_abort("Password could not be reset.")
    current_app.logger.info("Password reset completed for user %s", user.id)

    return jsonify({"message": "Password has been reset."}), HTTPStatus.OK

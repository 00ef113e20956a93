"""Profile blueprint: self-service edits and profile image uploads."""

from __future__ import annotations

import os
import uuid
from http import HTTPStatus
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required
from sqlalchemy import or_
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest, Conflict, InternalServerError, NotFound

from models import db
from models.user import User
from storage.local_storage import LocalStorage
from utils.auth_guard import current_claims
from utils.persistence import commit_or_abort, discard_stored_file
from utils.request_validation import parse_request_body

profile_bp = Blueprint("profile", __name__)

IMAGE_FIELD = "profileImage"
EDITABLE_FIELDS = ("name", "email", "phone")
DUPLICATE_CONTACT_DETAIL = "Another user already uses that email or phone."


def _require_user() -> User:
    user = db.session.get(User, current_claims()["id"])
    if user is None:
        raise NotFound("User not found.")
    return user


def _allowed_extensions() -> set[str]:
    configured = current_app.config.get("ALLOWED_UPLOAD_TYPES") or ""
    if isinstance(configured, str):
        configured = configured.split(",")
    allowed = {item.strip().lower().lstrip(".") for item in configured if item.strip()}
    if "jpeg" in allowed or "jpg" in allowed:
        allowed.update({"jpg", "jpeg"})
    return allowed


def _validate_image(file: FileStorage) -> None:
    if file.filename is None or file.filename.strip() == "":
        raise BadRequest("A profile image file is required.")

    extension = Path(file.filename).suffix.lower().lstrip(".")
    allowed = _allowed_extensions()
    if extension not in allowed:
        raise BadRequest(
            f"File type not allowed. Allowed types: {', '.join(sorted(allowed))}."
        )

    max_size = int(current_app.config.get("MAX_UPLOAD_SIZE", 0))
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if max_size and size > max_size:
        raise BadRequest(f"File exceeds the maximum upload size of {max_size} bytes.")


def _build_unique_filename(original: str) -> str:
    return f"{uuid.uuid4().hex}{Path(original).suffix.lower()}"


@profile_bp.route("/profile", methods=["PUT"])
@jwt_required()
def edit_profile():
    """Update the caller's name, email or phone."""

    user = _require_user()
    payload = parse_request_body(request)

    updates = {
        field: payload[field]
        for field in EDITABLE_FIELDS
        if isinstance(payload.get(field), str) and payload[field]
    }
    if not updates:
        raise BadRequest("Provide at least one of: name, email, phone.")
    if "email" in updates:
        updates["email"] = updates["email"].lower()

    contact_filters = [
        getattr(User, field) == updates[field]
        for field in ("email", "phone")
        if field in updates
    ]
    if contact_filters:
        clash = User.query.filter(User.id != user.id, or_(*contact_filters)).first()
        if clash is not None:
            raise Conflict(DUPLICATE_CONTACT_DETAIL)

    for field, value in updates.items():
        setattr(user, field, value)
    commit_or_abort("Profile could not be updated.", conflict_detail=DUPLICATE_CONTACT_DETAIL)
    current_app.logger.info("User %s updated %s", user.id, ", ".join(sorted(updates)))

    return jsonify({"message": "Profile updated."}), HTTPStatus.OK


@profile_bp.route("/profile/image", methods=["POST"])
@jwt_required()
def change_profile_image():
    """Replace the caller's profile image.

    The record is committed before the previous file is removed, so a failed
    write leaves the old image in place and discards the new upload.
    """

    user = _require_user()

    file = request.files.get(IMAGE_FIELD)
    if not isinstance(file, FileStorage):
        raise BadRequest("A profile image file is required.")
    _validate_image(file)

    storage = LocalStorage(current_app.config.get("UPLOAD_DIR"))
    try:
        stored_path = storage.save(file, _build_unique_filename(file.filename))
    except OSError as error:
        current_app.logger.exception("Saving profile image for user %s failed", user.id)
        raise InternalServerError("Profile image could not be changed.") from error

    previous = user.profile_image if user.has_custom_image else None
    user.profile_image = stored_path
    commit_or_abort(
        "Profile image could not be changed.",
        on_failure=lambda: discard_stored_file(storage, stored_path),
    )

    if previous and previous != stored_path:
        discard_stored_file(storage, previous)
    current_app.logger.info("User %s changed profile image", user.id)

    return (
        jsonify({"message": "Profile image changed.", "profileImage": stored_path}),
        HTTPStatus.OK,
    )

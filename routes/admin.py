"""Administrative user management."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import NotFound

from models import db
from models.user import User
from storage.local_storage import LocalStorage
from utils.auth_guard import admin_required, current_claims
from utils.persistence import commit_or_abort, discard_stored_file

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/users", methods=["GET"])
@jwt_required()
@admin_required
def list_users():
    """Return every account without credentials or reset state."""

    users = User.query.order_by(User.id.asc()).all()
    return jsonify([user.to_dict() for user in users])


@admin_bp.route("/user/<int:user_id>", methods=["DELETE"])
@jwt_required()
@admin_required
def delete_user(user_id: int):
    """Delete an account and, once committed, its stored profile image."""

    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found.")

    image = user.profile_image if user.has_custom_image else None
    db.session.delete(user)
    commit_or_abort("User could not be deleted.")
    current_app.logger.info(
        "Admin %s deleted user %s", current_claims()["id"], user_id
    )

    if image:
        discard_stored_file(LocalStorage(current_app.config.get("UPLOAD_DIR")), image)

    return jsonify({"message": "User deleted."})

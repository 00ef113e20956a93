"""Tests for administrator user management routes."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from models import db
from models.user import User, utcnow
from utils.tokens import issue_session_token


def _create_user(app, email: str, phone: str, role: str = "user", image: str | None = None) -> int:
    with app.app_context():
        user = User(name=email.split("@")[0], email=email, phone=phone, role=role)
        user.set_password("Pass1234")
        if image:
            user.profile_image = image
        user.start_password_reset("c" * 64, utcnow() + timedelta(hours=1))
        db.session.add(user)
        db.session.commit()
        return user.id


def _auth_headers(app, user_id: int) -> dict[str, str]:
    with app.app_context():
        token = issue_session_token(db.session.get(User, user_id), timedelta(hours=1))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(app) -> dict[str, str]:
    admin_id = _create_user(app, "admin@example.com", "5559000", role="admin")
    return _auth_headers(app, admin_id)


def test_list_users_hides_credentials(app, client, admin_headers):
    _create_user(app, "worker@example.com", "5559001")

    response = client.get("/api/auth/users", headers=admin_headers)

    assert response.status_code == 200
    users = response.get_json()
    assert [user["email"] for user in users] == ["admin@example.com", "worker@example.com"]
    for user in users:
        assert set(user) == {
            "id",
            "name",
            "email",
            "phone",
            "role",
            "profileImage",
            "createdAt",
            "updatedAt",
        }
        assert "password" not in user


def test_list_users_forbidden_for_regular_user(app, client):
    user_id = _create_user(app, "worker@example.com", "5559001")

    response = client.get("/api/auth/users", headers=_auth_headers(app, user_id))

    assert response.status_code == 403
    assert response.get_json()["error"] == "Forbidden"


def test_list_users_requires_token(client):
    response = client.get("/api/auth/users")

    assert response.status_code == 401


def test_delete_user_removes_record_and_image(app, client, admin_headers):
    upload_dir = Path(app.config["UPLOAD_DIR"])
    (upload_dir / "avatar.png").write_bytes(b"img")
    target_id = _create_user(app, "target@example.com", "5559002", image="avatar.png")

    response = client.delete(f"/api/auth/user/{target_id}", headers=admin_headers)

    assert response.status_code == 200
    assert not (upload_dir / "avatar.png").exists()
    with app.app_context():
        assert db.session.get(User, target_id) is None


def test_delete_missing_user_not_found(client, admin_headers):
    response = client.delete("/api/auth/user/9999", headers=admin_headers)

    assert response.status_code == 404
    assert response.get_json()["detail"] == "User not found."


def test_delete_user_forbidden_for_regular_user(app, client):
    user_id = _create_user(app, "worker@example.com", "5559001")
    other_id = _create_user(app, "other@example.com", "5559003")

    response = client.delete(
        f"/api/auth/user/{other_id}", headers=_auth_headers(app, user_id)
    )

    assert response.status_code == 403
    with app.app_context():
        assert db.session.get(User, other_id) is not None

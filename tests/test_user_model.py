"""Tests for the User model helpers."""

from datetime import timedelta

from models import db
from models.user import DEFAULT_PROFILE_IMAGE, User, utcnow


def _new_user(**overrides) -> User:
    fields = {"name": "Helper", "email": "helper@example.com", "phone": "5550001"}
    fields.update(overrides)
    return User(**fields)


def test_password_is_stored_as_salted_hash(app):
    with app.app_context():
        first = _new_user()
        first.set_password("secret")
        second = _new_user(email="other@example.com", phone="5550002")
        second.set_password("secret")
        db.session.add_all([first, second])
        db.session.commit()

        assert first.password_hash != "secret"
        assert first.password_hash.startswith("pbkdf2:sha256:")
        assert first.password_hash != second.password_hash
        assert first.check_password("secret") is True
        assert first.check_password("Secret") is False


def test_defaults_applied_on_create(app):
    with app.app_context():
        user = _new_user()
        user.set_password("secret")
        db.session.add(user)
        db.session.commit()

        assert user.role == "user"
        assert user.profile_image == DEFAULT_PROFILE_IMAGE
        assert user.has_custom_image is False
        assert user.token_version == 0
        assert user.reset_password_token is None
        assert user.created_at is not None
        assert user.updated_at is not None


def test_to_dict_omits_credentials_and_reset_state(app):
    with app.app_context():
        user = _new_user()
        user.set_password("secret")
        user.start_password_reset("a" * 64, utcnow() + timedelta(hours=1))
        db.session.add(user)
        db.session.commit()

        payload = user.to_dict()

    assert set(payload) == {
        "id",
        "name",
        "email",
        "phone",
        "role",
        "profileImage",
        "createdAt",
        "updatedAt",
    }
    assert "password" not in payload
    assert "password_hash" not in payload


def test_complete_password_reset_consumes_token(app):
    with app.app_context():
        user = _new_user()
        user.set_password("old-secret")
        user.start_password_reset("b" * 64, utcnow() + timedelta(hours=1))
        db.session.add(user)
        db.session.commit()

        user.complete_password_reset("new-secret")
        db.session.commit()
        db.session.refresh(user)

        assert user.check_password("new-secret") is True
        assert user.check_password("old-secret") is False
        assert user.reset_password_token is None
        assert user.reset_password_expire is None
        assert user.token_version == 1

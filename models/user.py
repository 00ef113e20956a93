"""User model definition."""

from datetime import UTC, datetime

from werkzeug.security import check_password_hash, generate_password_hash

from . import db


USER_ROLES = ("user", "admin")
DEFAULT_PROFILE_IMAGE = "default.jpg"

# Fixed work factor for the salted adaptive hash.
PASSWORD_HASH_METHOD = "pbkdf2:sha256:600000"


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, as stored in the table."""

    return datetime.now(UTC).replace(tzinfo=None)


class User(db.Model):
    """Represents a registered account."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    phone = db.Column(db.String(32), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(*USER_ROLES, name="user_role", native_enum=False),
        nullable=False,
        default="user",
        server_default=db.text("'user'"),
    )
    profile_image = db.Column(
        db.String(255),
        nullable=False,
        default=DEFAULT_PROFILE_IMAGE,
        server_default=db.text(f"'{DEFAULT_PROFILE_IMAGE}'"),
    )
    reset_password_token = db.Column(db.String(64), nullable=True, index=True)
    reset_password_expire = db.Column(db.DateTime, nullable=True)
    token_version = db.Column(
        db.Integer, nullable=False, default=0, server_default=db.text("0")
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(
            password, method=PASSWORD_HASH_METHOD
        )

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    @property
    def has_custom_image(self) -> bool:
        return bool(self.profile_image) and self.profile_image != DEFAULT_PROFILE_IMAGE

    def start_password_reset(self, token_hash: str, expires_at: datetime) -> None:
        """Record a pending reset; only the digest of the mailed token is kept."""

        self.reset_password_token = token_hash
        self.reset_password_expire = expires_at

    def complete_password_reset(self, new_password: str) -> None:
        """Store the new password, consume the reset token and end old sessions."""

        self.set_password(new_password)
        self.reset_password_token = None
        self.reset_password_expire = None
        self.token_version = (self.token_version or 0) + 1

    def to_dict(self) -> dict:
        """Serialize the public profile; credentials and reset state are omitted."""

        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
            "profileImage": self.profile_image,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"

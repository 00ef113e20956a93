"""create users table"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "users_20241019"
down_revision = None
branch_labels = None
depends_on = None


USER_ROLES = ("user", "admin")


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "role",
            sa.Enum(*USER_ROLES, name="user_role", native_enum=False),
            nullable=False,
            server_default=sa.text("'user'"),
        ),
        sa.Column(
            "profile_image",
            sa.String(length=255),
            nullable=False,
            server_default=sa.text("'default.jpg'"),
        ),
        sa.Column("reset_password_token", sa.String(length=64), nullable=True),
        sa.Column("reset_password_expire", sa.DateTime(), nullable=True),
        sa.Column("token_version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("phone", name="uq_users_phone"),
    )
    op.create_index(
        "ix_users_reset_password_token", "users", ["reset_password_token"]
    )


def downgrade():
    op.drop_index("ix_users_reset_password_token", table_name="users")
    op.drop_table("users")

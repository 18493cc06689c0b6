"""create users table

Revision ID: 002
Revises: 001
Create Date: 2026-09-14 09:30:00.000000

"""

from datetime import datetime, timedelta, timezone
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from passlib.context import CryptContext

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def upgrade() -> None:
    users = op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("subscription_expiry", sa.DateTime(), nullable=True),
        sa.Column("has_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"]),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Get settings from environment (will be loaded by Alembic env.py)
    from funeralcover.core.config import settings

    connection = op.get_bind()
    admin_role_result = connection.execute(
        sa.text("SELECT id FROM roles WHERE name = 'admin'")
    ).fetchone()

    if not admin_role_result:
        raise ValueError("Admin role not found. Make sure migration 001 has been run.")

    # The first admin starts on the same 30-day trial as everyone else.
    # Stored as naive UTC, matching UTCDateTime.
    trial_ends = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(days=30)

    op.bulk_insert(
        users,
        [
            {
                "name": settings.first_admin_name,
                "email": settings.first_admin_email,
                "password_hash": pwd_context.hash(settings.first_admin_password),
                "role_id": admin_role_result[0],
                "subscription_expiry": trial_ends,
                "has_paid": False,
            }
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")

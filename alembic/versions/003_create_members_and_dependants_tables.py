"""create members and dependants tables

Revision ID: 003
Revises: 002
Create Date: 2026-09-15 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("id_number", sa.String(32), nullable=False),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_members_id", "members", ["id"], unique=False)
    op.create_index("ix_members_id_number", "members", ["id_number"], unique=True)

    op.create_table(
        "dependants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
    )
    op.create_index("ix_dependants_id", "dependants", ["id"], unique=False)
    op.create_index("ix_dependants_member_id", "dependants", ["member_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_dependants_member_id", table_name="dependants")
    op.drop_index("ix_dependants_id", table_name="dependants")
    op.drop_table("dependants")
    op.drop_index("ix_members_id_number", table_name="members")
    op.drop_index("ix_members_id", table_name="members")
    op.drop_table("members")

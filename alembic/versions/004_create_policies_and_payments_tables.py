"""create policies and payments tables

Revision ID: 004
Revises: 003
Create Date: 2026-09-15 11:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "policies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("plan_type", sa.String(100), nullable=False),
        sa.Column("cover_level", sa.Numeric(12, 2), nullable=False),
        sa.Column("premium", sa.Numeric(12, 2), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Active"),
        sa.Column("last_payment_at", sa.DateTime(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
        sa.CheckConstraint("premium >= 0", name="ck_policies_premium_non_negative"),
        sa.CheckConstraint("cover_level >= 0", name="ck_policies_cover_level_non_negative"),
        sa.CheckConstraint(
            "status IN ('Active', 'Lapsed', 'Cancelled')",
            name="ck_policies_status",
        ),
    )
    op.create_index("ix_policies_id", "policies", ["id"], unique=False)
    op.create_index("ix_policies_member_id", "policies", ["member_id"], unique=False)
    op.create_index("ix_policies_status", "policies", ["status"], unique=False)

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("policy_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("paid_at", sa.DateTime(), nullable=False),
        sa.Column("reference", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["policy_id"], ["policies.id"]),
        sa.UniqueConstraint("reference", name="uq_payments_reference"),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )
    op.create_index("ix_payments_id", "payments", ["id"], unique=False)
    op.create_index("ix_payments_policy_id", "payments", ["policy_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_payments_policy_id", table_name="payments")
    op.drop_index("ix_payments_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_policies_status", table_name="policies")
    op.drop_index("ix_policies_member_id", table_name="policies")
    op.drop_index("ix_policies_id", table_name="policies")
    op.drop_table("policies")

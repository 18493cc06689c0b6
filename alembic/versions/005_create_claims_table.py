"""create claims table

Revision ID: 005
Revises: 004
Create Date: 2026-09-16 08:45:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "claims",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("policy_id", sa.Integer(), nullable=False),
        sa.Column("death_cert_path", sa.String(), nullable=True),
        sa.Column("affidavit_path", sa.String(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="Submitted"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("payout_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("paid_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["policy_id"], ["policies.id"]),
        sa.CheckConstraint(
            "status IN ('Submitted', 'UnderReview', 'Approved', 'Rejected', 'Paid')",
            name="ck_claims_status",
        ),
    )
    op.create_index("ix_claims_id", "claims", ["id"], unique=False)
    op.create_index("ix_claims_policy_id", "claims", ["policy_id"], unique=False)
    op.create_index("ix_claims_status", "claims", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_claims_status", table_name="claims")
    op.drop_index("ix_claims_policy_id", table_name="claims")
    op.drop_index("ix_claims_id", table_name="claims")
    op.drop_table("claims")

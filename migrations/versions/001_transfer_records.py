"""Create transfer_records ledger table

Revision ID: 001_transfer_records
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001_transfer_records"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create ledger schema"""

    # Журнал проводок: только вставка, записи не изменяются и не удаляются
    op.create_table(
        "transfer_records",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("stage", sa.String(20), nullable=False),
        sa.Column("reference", sa.Text(), nullable=False, server_default=""),
        sa.Column("recorded_at", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "stage IN ('create', 'confirm', 'consolidate', 'deliver', 'cancel')",
            name="chk_transfer_records_stage",
        ),
        sqlite_autoincrement=True,
    )

    op.create_index("idx_transfer_records_order_id", "transfer_records", ["order_id"], unique=False)


def downgrade() -> None:
    """Drop ledger schema"""
    op.drop_index("idx_transfer_records_order_id", table_name="transfer_records")
    op.drop_table("transfer_records")

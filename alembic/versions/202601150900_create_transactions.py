"""create transactions table

Revision ID: 202601150900
Revises:
Create Date: 2026-01-15 09:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


revision = "202601150900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column(
            "type", sa.Enum("income", "expense", name="transactiontype"), nullable=False
        ),
        sa.Column("category", sa.Text(), nullable=False, server_default=""),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "amount_cents >= 0", name="ck_transactions_amount_positive"
        ),
    )
    op.create_index("ix_transactions_date", "transactions", ["date"])


def downgrade():
    op.drop_index("ix_transactions_date", table_name="transactions")
    op.drop_table("transactions")

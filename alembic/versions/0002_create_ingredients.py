"""create ingredients

Revision ID: 0002_create_ingredients
Revises: 0001_create_potluck_tables
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0002_create_ingredients"
down_revision = "0001_create_potluck_tables"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "ingredients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("quantity", sa.String(length=50), nullable=True),
        sa.Column("checked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_ingredients_item_id", "ingredients", ["item_id"])


def downgrade() -> None:
    op.drop_index("ix_ingredients_item_id", table_name="ingredients")
    op.drop_table("ingredients")

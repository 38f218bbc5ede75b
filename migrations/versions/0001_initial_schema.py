"""initial schema: brands, supply items, printers, movements

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SUPPLY_KINDS = ("TONER", "DRUM")
TONER_COLORS = ("black", "cyan", "yellow", "magenta")

# supply_kind_enum is shared by two tables, so on PostgreSQL it is
# created once explicitly and referenced with create_type=False.
# Other backends get a VARCHAR with a CHECK constraint.
supply_kind = postgresql.ENUM(
    *SUPPLY_KINDS, name="supply_kind_enum", create_type=False
)
toner_color = postgresql.ENUM(
    *TONER_COLORS, name="toner_color_enum", create_type=False
)


def supply_kind_column_type():
    return sa.Enum(
        *SUPPLY_KINDS, name="supply_kind_enum", create_constraint=True
    ).with_variant(supply_kind, "postgresql")


def toner_color_column_type():
    return sa.Enum(
        *TONER_COLORS, name="toner_color_enum", create_constraint=True
    ).with_variant(toner_color, "postgresql")


def upgrade() -> None:
    bind = op.get_bind()
    supply_kind.create(bind, checkfirst=True)
    toner_color.create(bind, checkfirst=True)

    op.create_table(
        "brands",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "supply_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("kind", supply_kind_column_type(), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("color", toner_color_column_type(), nullable=True),
        sa.Column("unit_price", sa.Numeric(8, 2), nullable=True),
        sa.Column("initial_stock", sa.Integer(), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("stock >= 0", name="ck_supply_items_stock_non_negative"),
        sa.CheckConstraint(
            "initial_stock >= 0",
            name="ck_supply_items_initial_stock_non_negative",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("kind", "name", name="uq_supply_items_kind_name"),
    )
    op.create_index("ix_supply_items_kind", "supply_items", ["kind"])

    op.create_table(
        "printers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("model", sa.String(length=50), nullable=False),
        sa.Column("brand_ref", sa.Uuid(), nullable=True),
        sa.Column("toner_ref", sa.Uuid(), nullable=True),
        sa.Column("drum_ref", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["brand_ref"], ["brands.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["toner_ref"], ["supply_items.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["drum_ref"], ["supply_items.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_printers_brand_ref", "printers", ["brand_ref"])

    op.create_table(
        "movements",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("external_id", sa.Uuid(), nullable=False),
        sa.Column("printer_ref", sa.Uuid(), nullable=True),
        sa.Column("item_ref", sa.Uuid(), nullable=True),
        sa.Column("item_kind", supply_kind_column_type(), nullable=False),
        sa.Column("quantity_delta", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("quantity_delta <> 0", name="ck_movements_nonzero_delta"),
        sa.ForeignKeyConstraint(["printer_ref"], ["printers.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["item_ref"], ["supply_items.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("external_id"),
    )
    op.create_index("ix_movements_printer_ref", "movements", ["printer_ref"])
    op.create_index("ix_movements_item_ref", "movements", ["item_ref"])
    op.create_index("ix_movements_created_at", "movements", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_movements_created_at", table_name="movements")
    op.drop_index("ix_movements_item_ref", table_name="movements")
    op.drop_index("ix_movements_printer_ref", table_name="movements")
    op.drop_table("movements")
    op.drop_index("ix_printers_brand_ref", table_name="printers")
    op.drop_table("printers")
    op.drop_index("ix_supply_items_kind", table_name="supply_items")
    op.drop_table("supply_items")
    op.drop_table("brands")

    bind = op.get_bind()
    toner_color.drop(bind, checkfirst=True)
    supply_kind.drop(bind, checkfirst=True)

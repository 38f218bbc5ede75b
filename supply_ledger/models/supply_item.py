"""
Supply item model (toners and drums).

The stock column is the ledger's materialized aggregate. Only
the StockLedger writes it, always together with a movement.
The version column is bumped on every write so that a stock
update computed from a stale read is rejected instead of
silently overwriting a concurrent one.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Integer, Numeric,
    CheckConstraint, UniqueConstraint,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from supply_ledger.models.base import Base, utcnow
from supply_ledger.models.enums import SupplyKind, TonerColor


class SupplyItem(Base):
    __tablename__ = "supply_items"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_supply_items_stock_non_negative"),
        CheckConstraint(
            "initial_stock >= 0",
            name="ck_supply_items_initial_stock_non_negative",
        ),
        UniqueConstraint("kind", "name", name="uq_supply_items_kind_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    kind: Mapped[SupplyKind] = mapped_column(
        SAEnum(SupplyKind, name="supply_kind_enum", create_constraint=True),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[TonerColor | None] = mapped_column(
        SAEnum(TonerColor, name="toner_color_enum", create_constraint=True),
        nullable=True,
    )
    unit_price: Mapped[Decimal | None] = mapped_column(
        Numeric(8, 2), nullable=True
    )
    # Stock set when the item was created; the baseline that
    # surviving movements are added to.
    initial_stock: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<SupplyItem {self.kind.value} {self.name} stock={self.stock}>"

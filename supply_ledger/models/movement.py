"""
Movement model.

A movement is one signed change to an item's stock. Movements are
append-only: once inserted they are never modified or deleted
through the ORM. The only change a movement ever sees is its
item_ref or printer_ref being cleared when the referenced entity
is deleted, and that is done with a bulk UPDATE by the ledger's
retire_reference, which does not go through these listeners.

There are deliberately no ORM relationships to SupplyItem or
Printer: deleting a parent must never cascade into this table.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    DateTime, Integer, ForeignKey, CheckConstraint,
    Enum as SAEnum, Uuid, event,
)
from sqlalchemy.orm import Mapped, mapped_column

from supply_ledger.exceptions import MovementImmutable
from supply_ledger.models.base import Base, utcnow
from supply_ledger.models.enums import SupplyKind


class Movement(Base):
    """
    An immutable stock change.

    id is the insertion sequence and breaks ties between movements
    created in the same instant. external_id is the identity
    exposed to API clients.
    """

    __tablename__ = "movements"
    __table_args__ = (
        CheckConstraint(
            "quantity_delta <> 0", name="ck_movements_nonzero_delta"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4
    )
    printer_ref: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("printers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    item_ref: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("supply_items.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    item_kind: Mapped[SupplyKind] = mapped_column(
        SAEnum(SupplyKind, name="supply_kind_enum", create_constraint=True),
        nullable=False,
    )
    quantity_delta: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, index=True
    )

    def __repr__(self) -> str:
        return (
            f"<Movement {self.external_id} "
            f"{self.item_kind.value} {self.quantity_delta:+d}>"
        )


@event.listens_for(Movement, "before_update")
def _reject_movement_update(mapper, connection, target):
    raise MovementImmutable(target.external_id, "modified")


@event.listens_for(Movement, "before_delete")
def _reject_movement_delete(mapper, connection, target):
    raise MovementImmutable(target.external_id, "deleted")

"""
Printer model.

A printer accepts one toner and one drum. Every reference is
nullable: deleting the brand or a supply item keeps the printer
and clears the pointer.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from supply_ledger.models.base import Base, utcnow


class Printer(Base):
    __tablename__ = "printers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False
    )
    model: Mapped[str] = mapped_column(String(50), nullable=False)
    brand_ref: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("brands.id", ondelete="SET NULL"), nullable=True, index=True
    )
    toner_ref: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("supply_items.id", ondelete="SET NULL"), nullable=True
    )
    drum_ref: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("supply_items.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return f"<Printer {self.name} ({self.model})>"

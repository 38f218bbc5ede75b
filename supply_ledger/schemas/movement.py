"""
Pydantic schemas for stock movements.

These define the gateway contract: CreateMovement in,
StockUpdateResponse out, and the filter accepted by
ListMovements.
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from supply_ledger.models.enums import SupplyKind

# Range of the Integer columns holding deltas and stock
INT32_MIN = -2**31
INT32_MAX = 2**31 - 1


# --- Request Schemas ---

class MovementCreate(BaseModel):
    """
    Request to move stock for one item.

    A zero quantity_delta is accepted here; the ledger rejects
    it with ZERO_DELTA before touching the store.
    """
    item_id: uuid.UUID
    item_kind: SupplyKind
    printer_id: uuid.UUID | None = None
    quantity_delta: int = Field(ge=INT32_MIN, le=INT32_MAX)


class MovementFilter(BaseModel):
    """
    Optional criteria for listing movements, combined with AND.

    created_from is inclusive, created_to is exclusive.
    """
    item_id: uuid.UUID | None = None
    printer_id: uuid.UUID | None = None
    item_kind: SupplyKind | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None

    @field_validator("created_from", "created_to")
    @classmethod
    def to_naive_utc(cls, v: datetime | None) -> datetime | None:
        # Timestamps are stored as naive UTC
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


# --- Response Schemas ---

class MovementResponse(BaseModel):
    id: int
    external_id: uuid.UUID
    printer_ref: uuid.UUID | None
    item_ref: uuid.UUID | None
    item_kind: SupplyKind
    quantity_delta: int
    created_at: datetime

    model_config = {"from_attributes": True}


class StockUpdateResponse(BaseModel):
    """Response after a movement has been applied."""
    item_id: uuid.UUID
    stock: int = Field(ge=0)
    movement: MovementResponse

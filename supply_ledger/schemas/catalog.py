"""
Pydantic schemas for the supply catalog: brands, toners and drums.

Stock is readable on every item response but no request schema
accepts it after creation; stock only moves through movements.
"""

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from supply_ledger.models.enums import SupplyKind, TonerColor
from supply_ledger.schemas.movement import INT32_MAX


class SupplyPath(str, enum.Enum):
    """URL segment used by the catalog routes."""
    TONERS = "toners"
    DRUMS = "drums"

    @property
    def kind(self) -> SupplyKind:
        return SupplyKind.TONER if self is SupplyPath.TONERS else SupplyKind.DRUM


# --- Brand Schemas ---

class BrandCreate(BaseModel):
    name: str = Field(min_length=3, max_length=50)


class BrandUpdate(BaseModel):
    name: str = Field(min_length=3, max_length=50)


class BrandResponse(BaseModel):
    id: uuid.UUID
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Supply Item Schemas ---

class SupplyItemCreate(BaseModel):
    """Request to add a toner or drum to the catalog."""
    name: str = Field(min_length=1, max_length=50)
    color: TonerColor | None = None
    unit_price: Decimal | None = Field(default=None, ge=0, max_digits=8, decimal_places=2)
    initial_stock: int = Field(default=0, ge=0, le=INT32_MAX)


class SupplyItemUpdate(BaseModel):
    """
    Partial update of catalog attributes.

    extra="forbid" turns an attempt to send stock into a
    validation error instead of a silently ignored field.
    """
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=50)
    color: TonerColor | None = None
    unit_price: Decimal | None = Field(default=None, ge=0, max_digits=8, decimal_places=2)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: str | None) -> str:
        # Omit name to keep it; color and unit_price may be cleared
        if v is None:
            raise ValueError("name cannot be null")
        return v


class SupplyItemResponse(BaseModel):
    id: uuid.UUID
    kind: SupplyKind
    name: str
    color: TonerColor | None
    unit_price: Decimal | None
    initial_stock: int
    stock: int
    created_at: datetime

    model_config = {"from_attributes": True}


class StockResponse(BaseModel):
    """Response for a point-in-time stock query."""
    item_id: uuid.UUID
    kind: SupplyKind
    stock: int


class StockIntegrityResponse(BaseModel):
    """Stock recomputed from surviving movements, next to the stored value."""
    item_id: uuid.UUID
    stock: int
    initial_stock: int
    movement_total: int
    is_consistent: bool

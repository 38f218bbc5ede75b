"""
Pydantic schemas for the printer registry.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PrinterCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=50)
    brand_id: uuid.UUID | None = None
    toner_id: uuid.UUID | None = None
    drum_id: uuid.UUID | None = None


class PrinterUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=50)
    brand_id: uuid.UUID | None = None
    toner_id: uuid.UUID | None = None
    drum_id: uuid.UUID | None = None

    @field_validator("name", "model")
    @classmethod
    def not_null(cls, v: str | None) -> str:
        # The references may be cleared with null, name and model may not
        if v is None:
            raise ValueError("cannot be null")
        return v


class PrinterResponse(BaseModel):
    id: uuid.UUID
    name: str
    model: str
    brand_ref: uuid.UUID | None
    toner_ref: uuid.UUID | None
    drum_ref: uuid.UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}

"""
Movement API endpoints.

The gateway in front of the stock ledger: it validates the
request shape and hands the command to StockLedger, which owns
the transaction. Movements can be created and read, never
changed or removed.
"""

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from supply_ledger.models.base import get_db
from supply_ledger.models.enums import SupplyKind
from supply_ledger.services.stock_ledger import StockLedger
from supply_ledger.schemas.movement import (
    MovementCreate,
    MovementFilter,
    MovementResponse,
    StockUpdateResponse,
)

router = APIRouter(prefix="/movements", tags=["Movements"])


@router.post("", response_model=StockUpdateResponse, status_code=201)
def create_movement(
    request: MovementCreate,
    db: Session = Depends(get_db),
):
    """
    Apply a signed stock change to a toner or drum.

    Answers 400 for a zero delta, 404 for an unknown item or
    printer, 409 when stock would go negative and 503 when the
    store is unreachable or the update kept losing races.
    """
    result = StockLedger(db).apply_movement(
        request.item_id,
        request.item_kind,
        request.printer_id,
        request.quantity_delta,
    )
    return StockUpdateResponse(
        item_id=result.item_id,
        stock=result.stock,
        movement=MovementResponse.model_validate(result.movement),
    )


@router.get("", response_model=list[MovementResponse])
def list_movements(
    item_id: uuid.UUID | None = None,
    printer_id: uuid.UUID | None = None,
    item_kind: SupplyKind | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    db: Session = Depends(get_db),
):
    """List movements, oldest first. Every filter is optional."""
    filters = MovementFilter(
        item_id=item_id,
        printer_id=printer_id,
        item_kind=item_kind,
        created_from=created_from,
        created_to=created_to,
    )
    return list(StockLedger(db).list_movements(filters))


@router.get("/count", response_model=int)
def count_movements(
    item_kind: SupplyKind | None = None,
    db: Session = Depends(get_db),
):
    return StockLedger(db).count_movements(item_kind)


@router.get("/{movement_id}", response_model=MovementResponse)
def get_movement(movement_id: uuid.UUID, db: Session = Depends(get_db)):
    return StockLedger(db).get_movement(movement_id)

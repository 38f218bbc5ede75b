"""
Printer registry API endpoints.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from supply_ledger.exceptions import SupplyLedgerError
from supply_ledger.models.base import get_db
from supply_ledger.services.printer_service import PrinterService
from supply_ledger.schemas.printer import (
    PrinterCreate,
    PrinterUpdate,
    PrinterResponse,
)

router = APIRouter(prefix="/printers", tags=["Printers"])


@router.post("", response_model=PrinterResponse, status_code=201)
def create_printer(
    request: PrinterCreate,
    db: Session = Depends(get_db),
):
    service = PrinterService(db)
    try:
        printer = service.create_printer(request)
        db.commit()
        return printer
    except SupplyLedgerError:
        db.rollback()
        raise


@router.get("", response_model=list[PrinterResponse])
def list_printers(db: Session = Depends(get_db)):
    return PrinterService(db).list_printers()


@router.get("/count", response_model=int)
def count_printers(db: Session = Depends(get_db)):
    return PrinterService(db).count_printers()


@router.get("/{printer_id}", response_model=PrinterResponse)
def get_printer(printer_id: uuid.UUID, db: Session = Depends(get_db)):
    return PrinterService(db).get_printer(printer_id)


@router.patch("/{printer_id}", response_model=PrinterResponse)
def update_printer(
    printer_id: uuid.UUID,
    request: PrinterUpdate,
    db: Session = Depends(get_db),
):
    service = PrinterService(db)
    try:
        printer = service.update_printer(printer_id, request)
        db.commit()
        return printer
    except SupplyLedgerError:
        db.rollback()
        raise


@router.delete("/{printer_id}", status_code=204)
def delete_printer(printer_id: uuid.UUID, db: Session = Depends(get_db)):
    """
    Delete a printer.

    Movements recorded against it are kept with printer_ref cleared.
    """
    service = PrinterService(db)
    try:
        service.delete_printer(printer_id)
        db.commit()
    except SupplyLedgerError:
        db.rollback()
        raise

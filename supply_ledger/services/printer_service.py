"""
Printer registry service.

Registers printers and the toner and drum each accepts.
Deleting a printer keeps its movements, with printer_ref
cleared by the stock ledger.
"""

import logging
import uuid

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from supply_ledger.exceptions import (
    AlreadyExists,
    BrandNotFound,
    ItemNotFound,
    PrinterNotFound,
)
from supply_ledger.models.brand import Brand
from supply_ledger.models.enums import ReferenceKind, SupplyKind
from supply_ledger.models.printer import Printer
from supply_ledger.models.supply_item import SupplyItem
from supply_ledger.schemas.printer import PrinterCreate, PrinterUpdate
from supply_ledger.services.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class PrinterService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = StockLedger(db)

    def _validate_brand(self, brand_id: uuid.UUID | None) -> None:
        if brand_id is not None and self.db.get(Brand, brand_id) is None:
            raise BrandNotFound(brand_id)

    def _validate_supply(
        self, item_id: uuid.UUID | None, kind: SupplyKind
    ) -> None:
        """A printer's toner must be a toner and its drum a drum."""
        if item_id is None:
            return
        item = self.db.get(SupplyItem, item_id)
        if item is None or item.kind != kind:
            raise ItemNotFound(item_id, kind)

    def _ensure_name_free(self, name: str) -> None:
        existing = self.db.execute(
            select(Printer).where(Printer.name == name)
        ).scalar_one_or_none()
        if existing:
            raise AlreadyExists("Printer", name)

    def create_printer(self, request: PrinterCreate) -> Printer:
        self._ensure_name_free(request.name)
        self._validate_brand(request.brand_id)
        self._validate_supply(request.toner_id, SupplyKind.TONER)
        self._validate_supply(request.drum_id, SupplyKind.DRUM)

        printer = Printer(
            name=request.name,
            model=request.model,
            brand_ref=request.brand_id,
            toner_ref=request.toner_id,
            drum_ref=request.drum_id,
        )
        self.db.add(printer)
        self.db.flush()
        logger.info("Registered printer %s (%s)", printer.name, printer.id)
        return printer

    def get_printer(self, printer_id: uuid.UUID) -> Printer:
        printer = self.db.get(Printer, printer_id)
        if not printer:
            raise PrinterNotFound(printer_id)
        return printer

    def list_printers(self) -> list[Printer]:
        printers = self.db.execute(
            select(Printer).order_by(Printer.name)
        ).scalars().all()
        return list(printers)

    def count_printers(self) -> int:
        return self.db.execute(select(func.count(Printer.id))).scalar_one()

    def update_printer(
        self, printer_id: uuid.UUID, request: PrinterUpdate
    ) -> Printer:
        printer = self.get_printer(printer_id)
        changes = request.model_dump(exclude_unset=True)

        if changes.get("name") and changes["name"] != printer.name:
            self._ensure_name_free(changes["name"])
        if "brand_id" in changes:
            self._validate_brand(changes["brand_id"])
            printer.brand_ref = changes.pop("brand_id")
        if "toner_id" in changes:
            self._validate_supply(changes["toner_id"], SupplyKind.TONER)
            printer.toner_ref = changes.pop("toner_id")
        if "drum_id" in changes:
            self._validate_supply(changes["drum_id"], SupplyKind.DRUM)
            printer.drum_ref = changes.pop("drum_id")

        for field, value in changes.items():
            setattr(printer, field, value)

        self.db.flush()
        return printer

    def delete_printer(self, printer_id: uuid.UUID) -> int:
        """Delete a printer; returns the number of movements retired."""
        printer = self.get_printer(printer_id)

        retired = self.ledger.retire_reference(ReferenceKind.PRINTER, printer_id)
        self.db.delete(printer)
        self.db.flush()

        logger.info(
            "Deleted printer %s (%d movement(s) retired)", printer_id, retired
        )
        return retired

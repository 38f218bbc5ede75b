"""
Catalog service: brands, toners and drums.

The catalog owns the identity and static attributes of supply
items. It creates items with their initial stock and never
touches stock afterwards; that belongs to the StockLedger.

Like the registry, this service only flushes. The caller
decides when to commit.
"""

import logging
import uuid

from sqlalchemy import select, func, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from supply_ledger.exceptions import (
    AlreadyExists,
    BrandNotFound,
    ConcurrencyConflict,
    InvalidItemAttributes,
    ItemNotFound,
)
from supply_ledger.models.brand import Brand
from supply_ledger.models.enums import ReferenceKind, SupplyKind
from supply_ledger.models.printer import Printer
from supply_ledger.models.supply_item import SupplyItem
from supply_ledger.schemas.catalog import (
    BrandCreate,
    BrandUpdate,
    SupplyItemCreate,
    SupplyItemUpdate,
)
from supply_ledger.services.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class CatalogService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = StockLedger(db)

    # --- Brands ---

    def create_brand(self, request: BrandCreate) -> Brand:
        self._ensure_brand_name_free(request.name)

        brand = Brand(name=request.name)
        self.db.add(brand)
        self.db.flush()
        logger.info("Created brand %s (%s)", brand.name, brand.id)
        return brand

    def get_brand(self, brand_id: uuid.UUID) -> Brand:
        brand = self.db.get(Brand, brand_id)
        if not brand:
            raise BrandNotFound(brand_id)
        return brand

    def list_brands(self) -> list[Brand]:
        brands = self.db.execute(
            select(Brand).order_by(Brand.name)
        ).scalars().all()
        return list(brands)

    def update_brand(self, brand_id: uuid.UUID, request: BrandUpdate) -> Brand:
        brand = self.get_brand(brand_id)
        if request.name != brand.name:
            self._ensure_brand_name_free(request.name)
            brand.name = request.name
        self.db.flush()
        return brand

    def delete_brand(self, brand_id: uuid.UUID) -> None:
        """Delete a brand; its printers stay, with brand_ref cleared."""
        brand = self.get_brand(brand_id)

        self.db.execute(
            update(Printer)
            .where(Printer.brand_ref == brand_id)
            .values(brand_ref=None)
        )
        self.db.delete(brand)
        self.db.flush()
        logger.info("Deleted brand %s", brand_id)

    def _ensure_brand_name_free(self, name: str) -> None:
        existing = self.db.execute(
            select(Brand).where(Brand.name == name)
        ).scalar_one_or_none()
        if existing:
            raise AlreadyExists("Brand", name)

    # --- Supply items ---

    def create_item(
        self, kind: SupplyKind, request: SupplyItemCreate
    ) -> SupplyItem:
        """
        Add a toner or drum to the catalog.

        initial_stock is the baseline the ledger adds movements to.
        Only toners carry a color.
        """
        if kind == SupplyKind.DRUM and request.color is not None:
            raise InvalidItemAttributes("Drums do not have a color", color=request.color)
        self._ensure_item_name_free(kind, request.name)

        item = SupplyItem(
            kind=kind,
            name=request.name,
            color=request.color,
            unit_price=request.unit_price,
            initial_stock=request.initial_stock,
            stock=request.initial_stock,
        )
        self.db.add(item)
        self.db.flush()
        logger.info(
            "Created %s %s (%s) with stock %d",
            kind.value.lower(), item.name, item.id, item.stock,
        )
        return item

    def get_item(
        self, item_id: uuid.UUID, kind: SupplyKind | None = None
    ) -> SupplyItem:
        """Get an item by id; with kind given, an item of another kind is not found."""
        item = self.db.get(SupplyItem, item_id)
        if not item or (kind is not None and item.kind != kind):
            raise ItemNotFound(item_id, kind)
        return item

    def list_items(self, kind: SupplyKind) -> list[SupplyItem]:
        items = self.db.execute(
            select(SupplyItem)
            .where(SupplyItem.kind == kind)
            .order_by(SupplyItem.name)
        ).scalars().all()
        return list(items)

    def count_items(self, kind: SupplyKind) -> int:
        return self.db.execute(
            select(func.count(SupplyItem.id)).where(SupplyItem.kind == kind)
        ).scalar_one()

    def update_item(
        self, item_id: uuid.UUID, kind: SupplyKind, request: SupplyItemUpdate
    ) -> SupplyItem:
        """Change catalog attributes. Stock is not an attribute."""
        item = self.get_item(item_id, kind)
        changes = request.model_dump(exclude_unset=True)

        if kind == SupplyKind.DRUM and changes.get("color") is not None:
            raise InvalidItemAttributes("Drums do not have a color", color=changes["color"])
        if changes.get("name") and changes["name"] != item.name:
            self._ensure_item_name_free(kind, changes["name"])

        for field, value in changes.items():
            setattr(item, field, value)

        try:
            self.db.flush()
        except StaleDataError as e:
            # A movement committed between our read and this write
            self.db.rollback()
            raise ConcurrencyConflict(item_id, 1) from e
        return item

    def delete_item(self, item_id: uuid.UUID, kind: SupplyKind) -> int:
        """
        Delete an item, keeping its movements as history.

        Movements pointing at the item have item_ref cleared, and
        printers that accepted it have toner_ref/drum_ref cleared,
        all in the caller's transaction. Returns the number of
        movements retired.
        """
        item = self.get_item(item_id, kind)

        retired = self.ledger.retire_reference(ReferenceKind.SUPPLY_ITEM, item_id)
        self.db.execute(
            update(Printer)
            .where(Printer.toner_ref == item_id)
            .values(toner_ref=None)
        )
        self.db.execute(
            update(Printer)
            .where(Printer.drum_ref == item_id)
            .values(drum_ref=None)
        )
        self.db.delete(item)
        try:
            self.db.flush()
        except StaleDataError as e:
            self.db.rollback()
            raise ConcurrencyConflict(item_id, 1) from e

        logger.info(
            "Deleted %s %s (stock %d discarded, %d movement(s) retired)",
            kind.value.lower(), item_id, item.stock, retired,
        )
        return retired

    def _ensure_item_name_free(self, kind: SupplyKind, name: str) -> None:
        existing = self.db.execute(
            select(SupplyItem).where(
                SupplyItem.kind == kind, SupplyItem.name == name
            )
        ).scalar_one_or_none()
        if existing:
            raise AlreadyExists(kind.value.capitalize(), name)

"""
Tests for the CatalogService.

Tests cover:
- Brand CRUD and name uniqueness
- Toner and drum creation with initial stock
- Kind-scoped lookups
- Attribute updates that never touch stock
- Item deletion
"""

import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError

from supply_ledger.exceptions import (
    AlreadyExists,
    BrandNotFound,
    ConcurrencyConflict,
    InvalidItemAttributes,
    ItemNotFound,
)
from supply_ledger.models.enums import SupplyKind, TonerColor
from supply_ledger.schemas.catalog import (
    BrandCreate,
    BrandUpdate,
    SupplyItemCreate,
    SupplyItemUpdate,
)
from supply_ledger.services.catalog_service import CatalogService
from supply_ledger.services.printer_service import PrinterService
from supply_ledger.services.stock_ledger import StockLedger

from tests.helpers import make_brand, make_drum, make_printer, make_toner


# --- Brand Tests ---

class TestBrands:

    def test_create_and_get(self, db_session):
        service = CatalogService(db_session)
        brand = make_brand(db_session, name="Brother")

        assert service.get_brand(brand.id).name == "Brother"

    def test_duplicate_name_rejected(self, db_session):
        make_brand(db_session, name="Canon")

        with pytest.raises(AlreadyExists) as exc_info:
            CatalogService(db_session).create_brand(BrandCreate(name="Canon"))

        assert exc_info.value.details == {"entity": "Brand", "name": "Canon"}

    def test_short_name_rejected(self):
        with pytest.raises(ValidationError):
            BrandCreate(name="HP")

    def test_list_sorted_by_name(self, db_session):
        for name in ("Xerox", "Brother", "Kyocera"):
            make_brand(db_session, name=name)

        names = [b.name for b in CatalogService(db_session).list_brands()]
        assert names == ["Brother", "Kyocera", "Xerox"]

    def test_rename(self, db_session):
        brand = make_brand(db_session, name="Brothr")

        updated = CatalogService(db_session).update_brand(
            brand.id, BrandUpdate(name="Brother")
        )

        assert updated.name == "Brother"

    def test_rename_to_taken_name_rejected(self, db_session):
        make_brand(db_session, name="Brother")
        other = make_brand(db_session, name="Canon")

        with pytest.raises(AlreadyExists):
            CatalogService(db_session).update_brand(
                other.id, BrandUpdate(name="Brother")
            )

    def test_delete_keeps_printers(self, db_session):
        brand = make_brand(db_session)
        brand_id = brand.id
        printer = make_printer(db_session, brand=brand)
        service = CatalogService(db_session)

        service.delete_brand(brand_id)
        db_session.commit()

        with pytest.raises(BrandNotFound):
            service.get_brand(brand_id)
        assert PrinterService(db_session).get_printer(printer.id).brand_ref is None

    def test_get_unknown_raises(self, db_session):
        with pytest.raises(BrandNotFound):
            CatalogService(db_session).get_brand(uuid.uuid4())


# --- Supply Item Tests ---

class TestCreateItem:

    def test_toner_starts_at_initial_stock(self, db_session):
        toner = make_toner(db_session, stock=12, color=TonerColor.CYAN)

        assert toner.kind == SupplyKind.TONER
        assert toner.color == TonerColor.CYAN
        assert toner.stock == 12
        assert toner.initial_stock == 12
        assert toner.unit_price == Decimal("49.90")
        assert StockLedger(db_session).current_stock(toner.id) == 12

    def test_drum_defaults(self, db_session):
        drum = make_drum(db_session)

        assert drum.kind == SupplyKind.DRUM
        assert drum.color is None
        assert drum.stock == 0

    def test_drum_with_color_rejected(self, db_session):
        with pytest.raises(InvalidItemAttributes):
            CatalogService(db_session).create_item(
                SupplyKind.DRUM,
                SupplyItemCreate(name="DR-2000", color=TonerColor.BLACK),
            )

    def test_negative_initial_stock_rejected(self):
        with pytest.raises(ValidationError):
            SupplyItemCreate(name="TN-1", initial_stock=-1)

    def test_duplicate_name_within_kind_rejected(self, db_session):
        make_toner(db_session, name="TN-2420")

        with pytest.raises(AlreadyExists) as exc_info:
            make_toner(db_session, name="TN-2420")

        assert exc_info.value.details["entity"] == "Toner"

    def test_same_name_allowed_across_kinds(self, db_session):
        make_toner(db_session, name="X-100")
        drum = make_drum(db_session, name="X-100")

        assert drum.name == "X-100"


class TestGetAndListItems:

    def test_get_with_kind(self, db_session):
        toner = make_toner(db_session)
        assert CatalogService(db_session).get_item(toner.id, SupplyKind.TONER).id == toner.id

    def test_get_with_wrong_kind_not_found(self, db_session):
        toner = make_toner(db_session)

        with pytest.raises(ItemNotFound):
            CatalogService(db_session).get_item(toner.id, SupplyKind.DRUM)

    def test_list_and_count_per_kind(self, db_session):
        make_toner(db_session, name="TN-b")
        make_toner(db_session, name="TN-a")
        make_drum(db_session, name="DR-a")
        service = CatalogService(db_session)

        assert [t.name for t in service.list_items(SupplyKind.TONER)] == ["TN-a", "TN-b"]
        assert [d.name for d in service.list_items(SupplyKind.DRUM)] == ["DR-a"]
        assert service.count_items(SupplyKind.TONER) == 2
        assert service.count_items(SupplyKind.DRUM) == 1


class TestUpdateItem:

    def test_update_attributes(self, db_session):
        toner = make_toner(db_session, stock=5)
        service = CatalogService(db_session)

        updated = service.update_item(
            toner.id,
            SupplyKind.TONER,
            SupplyItemUpdate(name="TN-1050", unit_price=Decimal("55.00")),
        )
        db_session.commit()

        assert updated.name == "TN-1050"
        assert updated.unit_price == Decimal("55.00")
        assert updated.stock == 5

    def test_stock_is_not_updatable(self):
        with pytest.raises(ValidationError):
            SupplyItemUpdate(stock=100)

    def test_drum_color_rejected(self, db_session):
        drum = make_drum(db_session)

        with pytest.raises(InvalidItemAttributes):
            CatalogService(db_session).update_item(
                drum.id, SupplyKind.DRUM, SupplyItemUpdate(color=TonerColor.YELLOW)
            )

    def test_rename_to_taken_name_rejected(self, db_session):
        make_toner(db_session, name="TN-1")
        other = make_toner(db_session, name="TN-2")

        with pytest.raises(AlreadyExists):
            CatalogService(db_session).update_item(
                other.id, SupplyKind.TONER, SupplyItemUpdate(name="TN-1")
            )

    def test_update_after_movement_keeps_stock(self, db_session):
        toner = make_toner(db_session, stock=5)
        StockLedger(db_session).apply_movement(toner.id, SupplyKind.TONER, None, -2)

        CatalogService(db_session).update_item(
            toner.id, SupplyKind.TONER, SupplyItemUpdate(name="TN-renamed")
        )
        db_session.commit()

        assert StockLedger(db_session).verify_stock(toner.id)["stock"] == 3


class TestDeleteItem:

    def test_delete_removes_item(self, db_session):
        drum_id = make_drum(db_session, stock=3).id
        service = CatalogService(db_session)

        retired = service.delete_item(drum_id, SupplyKind.DRUM)
        db_session.commit()

        assert retired == 0
        with pytest.raises(ItemNotFound):
            service.get_item(drum_id)

    def test_delete_clears_printer_supplies(self, db_session):
        toner = make_toner(db_session)
        drum = make_drum(db_session)
        printer = make_printer(db_session, toner=toner, drum=drum)

        CatalogService(db_session).delete_item(toner.id, SupplyKind.TONER)
        db_session.commit()

        refreshed = PrinterService(db_session).get_printer(printer.id)
        assert refreshed.toner_ref is None
        assert refreshed.drum_ref == drum.id

    def test_delete_with_wrong_kind_not_found(self, db_session):
        toner = make_toner(db_session)

        with pytest.raises(ItemNotFound):
            CatalogService(db_session).delete_item(toner.id, SupplyKind.DRUM)


class TestStaleCatalogWrites:

    def test_null_name_rejected_by_schema(self):
        with pytest.raises(ValidationError):
            SupplyItemUpdate(name=None)

    def test_stale_update_reports_single_attempt(self, db_session, session_factory):
        toner = make_toner(db_session, stock=5)
        service = CatalogService(db_session)
        item = service.get_item(toner.id, SupplyKind.TONER)

        # Another writer bumps the version after we loaded the item
        other = session_factory()
        try:
            StockLedger(other).apply_movement(toner.id, SupplyKind.TONER, None, 1)
        finally:
            other.close()

        with pytest.raises(ConcurrencyConflict) as exc_info:
            service.update_item(item.id, SupplyKind.TONER, SupplyItemUpdate(name="TN-x"))

        assert exc_info.value.attempts == 1
        assert exc_info.value.message.endswith("after 1 attempt")
        assert StockLedger(db_session).current_stock(toner.id) == 6

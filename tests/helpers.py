"""Builders shared by the service tests."""

from decimal import Decimal

from supply_ledger.models.enums import SupplyKind, TonerColor
from supply_ledger.schemas.catalog import SupplyItemCreate, BrandCreate
from supply_ledger.schemas.printer import PrinterCreate
from supply_ledger.services.catalog_service import CatalogService
from supply_ledger.services.printer_service import PrinterService


def make_toner(db_session, name="TN-1000", stock=0, color=TonerColor.BLACK):
    """Create and commit a toner."""
    item = CatalogService(db_session).create_item(
        SupplyKind.TONER,
        SupplyItemCreate(
            name=name,
            color=color,
            unit_price=Decimal("49.90"),
            initial_stock=stock,
        ),
    )
    db_session.commit()
    return item


def make_drum(db_session, name="DR-1000", stock=0):
    """Create and commit a drum."""
    item = CatalogService(db_session).create_item(
        SupplyKind.DRUM,
        SupplyItemCreate(name=name, initial_stock=stock),
    )
    db_session.commit()
    return item


def make_brand(db_session, name="Brother"):
    brand = CatalogService(db_session).create_brand(BrandCreate(name=name))
    db_session.commit()
    return brand


def make_printer(db_session, name="Front desk", brand=None, toner=None, drum=None):
    """Create and commit a printer, optionally wired to a brand, toner and drum."""
    printer = PrinterService(db_session).create_printer(PrinterCreate(
        name=name,
        model="HL-L2350DW",
        brand_id=brand.id if brand else None,
        toner_id=toner.id if toner else None,
        drum_id=drum.id if drum else None,
    ))
    db_session.commit()
    return printer

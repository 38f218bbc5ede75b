"""
Tests for the PrinterService.
"""

import uuid

import pytest

from supply_ledger.exceptions import (
    AlreadyExists,
    BrandNotFound,
    ItemNotFound,
    PrinterNotFound,
)
from supply_ledger.schemas.printer import PrinterCreate, PrinterUpdate
from supply_ledger.services.printer_service import PrinterService

from tests.helpers import make_brand, make_drum, make_printer, make_toner


class TestCreatePrinter:

    def test_create_with_supplies(self, db_session):
        brand = make_brand(db_session)
        toner = make_toner(db_session)
        drum = make_drum(db_session)

        printer = make_printer(db_session, brand=brand, toner=toner, drum=drum)

        assert printer.brand_ref == brand.id
        assert printer.toner_ref == toner.id
        assert printer.drum_ref == drum.id

    def test_create_bare(self, db_session):
        printer = make_printer(db_session)
        assert printer.brand_ref is None
        assert printer.toner_ref is None

    def test_duplicate_name_rejected(self, db_session):
        make_printer(db_session, name="Accounting")

        with pytest.raises(AlreadyExists):
            make_printer(db_session, name="Accounting")

    def test_unknown_brand_rejected(self, db_session):
        with pytest.raises(BrandNotFound):
            PrinterService(db_session).create_printer(
                PrinterCreate(name="P1", model="M1", brand_id=uuid.uuid4())
            )

    def test_drum_as_toner_rejected(self, db_session):
        drum = make_drum(db_session)

        with pytest.raises(ItemNotFound):
            PrinterService(db_session).create_printer(
                PrinterCreate(name="P1", model="M1", toner_id=drum.id)
            )


class TestQueryPrinters:

    def test_get_unknown_raises(self, db_session):
        with pytest.raises(PrinterNotFound):
            PrinterService(db_session).get_printer(uuid.uuid4())

    def test_list_and_count(self, db_session):
        make_printer(db_session, name="Reception")
        make_printer(db_session, name="Lab")
        service = PrinterService(db_session)

        assert [p.name for p in service.list_printers()] == ["Lab", "Reception"]
        assert service.count_printers() == 2


class TestUpdatePrinter:

    def test_swap_toner(self, db_session):
        old = make_toner(db_session, name="TN-old")
        new = make_toner(db_session, name="TN-new")
        printer = make_printer(db_session, toner=old)

        updated = PrinterService(db_session).update_printer(
            printer.id, PrinterUpdate(toner_id=new.id)
        )

        assert updated.toner_ref == new.id

    def test_clear_brand(self, db_session):
        brand = make_brand(db_session)
        printer = make_printer(db_session, brand=brand)

        updated = PrinterService(db_session).update_printer(
            printer.id, PrinterUpdate(brand_id=None)
        )

        assert updated.brand_ref is None

    def test_unset_fields_untouched(self, db_session):
        brand = make_brand(db_session)
        printer = make_printer(db_session, brand=brand)

        updated = PrinterService(db_session).update_printer(
            printer.id, PrinterUpdate(model="HL-L2370DW")
        )

        assert updated.model == "HL-L2370DW"
        assert updated.brand_ref == brand.id

    def test_toner_as_drum_rejected(self, db_session):
        toner = make_toner(db_session)
        printer = make_printer(db_session)

        with pytest.raises(ItemNotFound):
            PrinterService(db_session).update_printer(
                printer.id, PrinterUpdate(drum_id=toner.id)
            )


class TestDeletePrinter:

    def test_delete(self, db_session):
        printer_id = make_printer(db_session).id
        service = PrinterService(db_session)

        assert service.delete_printer(printer_id) == 0
        db_session.commit()

        with pytest.raises(PrinterNotFound):
            service.get_printer(printer_id)

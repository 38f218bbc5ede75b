"""Business logic services."""

from supply_ledger.services.stock_ledger import StockLedger
from supply_ledger.services.catalog_service import CatalogService
from supply_ledger.services.printer_service import PrinterService

__all__ = ["StockLedger", "CatalogService", "PrinterService"]

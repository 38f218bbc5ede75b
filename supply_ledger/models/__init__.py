"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from supply_ledger.models.base import Base
from supply_ledger.models.enums import SupplyKind, TonerColor, ReferenceKind
from supply_ledger.models.brand import Brand
from supply_ledger.models.supply_item import SupplyItem
from supply_ledger.models.printer import Printer
from supply_ledger.models.movement import Movement

__all__ = [
    "Base",
    "SupplyKind",
    "TonerColor",
    "ReferenceKind",
    "Brand",
    "SupplyItem",
    "Printer",
    "Movement",
]

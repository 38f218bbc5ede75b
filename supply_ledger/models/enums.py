"""
Shared enumerations for database models.

Python enums mapped to database enums, so an invalid supply
kind or toner color is rejected by the database as well.
"""

import enum


class SupplyKind(str, enum.Enum):
    """The two families of consumables tracked by the ledger."""
    TONER = "TONER"
    DRUM = "DRUM"


class TonerColor(str, enum.Enum):
    BLACK = "black"
    CYAN = "cyan"
    YELLOW = "yellow"
    MAGENTA = "magenta"


class ReferenceKind(str, enum.Enum):
    """Entities a movement can point at."""
    SUPPLY_ITEM = "SUPPLY_ITEM"
    PRINTER = "PRINTER"

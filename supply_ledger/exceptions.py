"""
Typed errors for the supply ledger.

Every error carries a machine-readable ``code``, the HTTP status the
API layer should answer with, and structured ``details`` so callers
never have to parse messages.

    SupplyLedgerError
    +-- NotFoundError
    |   +-- ItemNotFound
    |   +-- PrinterNotFound
    |   +-- BrandNotFound
    |   +-- MovementNotFound
    +-- ZeroDelta
    +-- InsufficientStock
    +-- QuantityOutOfRange
    +-- AlreadyExists
    +-- InvalidItemAttributes
    +-- MovementImmutable
    +-- TransientError
        +-- ConcurrencyConflict
        +-- StoreUnavailable
"""

from typing import Any


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    # UUIDs and enums end up here
    return str(getattr(value, "value", value))


class SupplyLedgerError(Exception):
    """Base class for all domain errors."""

    code: str = "SUPPLY_LEDGER_ERROR"
    status_code: int = 400

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": {k: _jsonable(v) for k, v in self.details.items()},
        }


# --- Missing references ---

class NotFoundError(SupplyLedgerError):
    code = "NOT_FOUND"
    status_code = 404


class ItemNotFound(NotFoundError):
    code = "ITEM_NOT_FOUND"

    def __init__(self, item_id, item_kind=None):
        self.item_id = item_id
        self.item_kind = item_kind
        kind = f"{item_kind.value.lower()} " if item_kind is not None else ""
        super().__init__(
            f"Supply {kind}{item_id} not found",
            item_id=item_id,
            item_kind=item_kind,
        )


class PrinterNotFound(NotFoundError):
    code = "PRINTER_NOT_FOUND"

    def __init__(self, printer_id):
        self.printer_id = printer_id
        super().__init__(
            f"Printer {printer_id} not found", printer_id=printer_id
        )


class BrandNotFound(NotFoundError):
    code = "BRAND_NOT_FOUND"

    def __init__(self, brand_id):
        self.brand_id = brand_id
        super().__init__(f"Brand {brand_id} not found", brand_id=brand_id)


class MovementNotFound(NotFoundError):
    code = "MOVEMENT_NOT_FOUND"

    def __init__(self, movement_id):
        self.movement_id = movement_id
        super().__init__(
            f"Movement {movement_id} not found", movement_id=movement_id
        )


# --- Rejected requests ---

class ZeroDelta(SupplyLedgerError):
    code = "ZERO_DELTA"
    status_code = 400

    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(
            "Movement quantity cannot be zero", item_id=item_id
        )


class InsufficientStock(SupplyLedgerError):
    code = "INSUFFICIENT_STOCK"
    status_code = 409

    def __init__(self, item_id, current_stock: int, attempted_delta: int):
        self.item_id = item_id
        self.current_stock = current_stock
        self.attempted_delta = attempted_delta
        super().__init__(
            f"Insufficient stock: available={current_stock}, "
            f"requested delta={attempted_delta}",
            item_id=item_id,
            current_stock=current_stock,
            attempted_delta=attempted_delta,
        )


class QuantityOutOfRange(SupplyLedgerError):
    """The delta, or the stock it would produce, does not fit the stock column."""

    code = "QUANTITY_OUT_OF_RANGE"
    status_code = 400

    def __init__(self, item_id, attempted_delta: int, current_stock: int | None = None):
        self.item_id = item_id
        self.attempted_delta = attempted_delta
        self.current_stock = current_stock
        super().__init__(
            f"Quantity out of range: delta={attempted_delta}",
            item_id=item_id,
            attempted_delta=attempted_delta,
            current_stock=current_stock,
        )


class AlreadyExists(SupplyLedgerError):
    code = "ALREADY_EXISTS"
    status_code = 409

    def __init__(self, entity: str, name: str):
        self.entity = entity
        self.name = name
        super().__init__(
            f"{entity} with name '{name}' already exists",
            entity=entity,
            name=name,
        )


class InvalidItemAttributes(SupplyLedgerError):
    code = "INVALID_ATTRIBUTES"
    status_code = 400


class MovementImmutable(SupplyLedgerError):
    """Raised by the ORM guard when a posted movement is touched."""

    code = "MOVEMENT_IMMUTABLE"
    status_code = 409

    def __init__(self, movement_id, operation: str):
        self.movement_id = movement_id
        self.operation = operation
        super().__init__(
            f"Movement {movement_id} is append-only and cannot be {operation}",
            movement_id=movement_id,
            operation=operation,
        )


# --- Transient failures ---

class TransientError(SupplyLedgerError):
    """The request was valid but the store could not complete it now."""

    code = "TRANSIENT_ERROR"
    status_code = 503


class ConcurrencyConflict(TransientError):
    code = "CONCURRENCY_CONFLICT"

    def __init__(self, item_id, attempts: int):
        self.item_id = item_id
        self.attempts = attempts
        super().__init__(
            f"Could not serialize stock update for {item_id} "
            f"after {attempts} attempt{'' if attempts == 1 else 's'}",
            item_id=item_id,
            attempts=attempts,
        )


class StoreUnavailable(TransientError):
    code = "STORE_UNAVAILABLE"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__("The inventory store is unavailable", reason=reason)

"""
Stock ledger: the core of the inventory system.

This service enforces the fundamental rules:
1. Stock never goes below zero
2. Movements are append-only
3. A movement and its stock update commit together or not at all
4. Two writers on the same item are serialized

No other service writes stock. Catalog and registry deletions go
through retire_reference so that history survives the deletion.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import select, func, update
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
)
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.orm import Session

from supply_ledger.config import get_settings
from supply_ledger.exceptions import (
    ConcurrencyConflict,
    ItemNotFound,
    InsufficientStock,
    MovementNotFound,
    PrinterNotFound,
    QuantityOutOfRange,
    StoreUnavailable,
    SupplyLedgerError,
    ZeroDelta,
)
from supply_ledger.models.enums import ReferenceKind, SupplyKind
from supply_ledger.models.movement import Movement
from supply_ledger.models.printer import Printer
from supply_ledger.models.supply_item import SupplyItem
from supply_ledger.schemas.movement import INT32_MAX, INT32_MIN, MovementFilter

logger = logging.getLogger(__name__)

# PostgreSQL serialization_failure and deadlock_detected
CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})


@dataclass
class StockUpdate:
    """Result of a committed movement."""
    item_id: uuid.UUID
    stock: int
    movement: Movement


class MovementSequence:
    """
    Lazy, restartable view over the movement log.

    Nothing is read until the sequence is iterated, and every new
    iteration runs the query again, so the same sequence can be
    walked more than once and always reflects committed state.
    """

    def __init__(self, db: Session, statement, batch_size: int = 100):
        self.db = db
        self.statement = statement
        self.batch_size = batch_size

    def __iter__(self) -> Iterator[Movement]:
        result = self.db.scalars(
            self.statement,
            execution_options={"yield_per": self.batch_size},
        )
        yield from result


def is_conflict(exc: Exception) -> bool:
    """Whether a store error means we lost a race and may retry."""
    if isinstance(exc, (StaleDataError, IntegrityError)):
        return True
    if isinstance(exc, DBAPIError):
        orig = exc.orig
        sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
        if sqlstate in CONFLICT_SQLSTATES:
            return True
        return "database is locked" in str(orig).lower()
    return False


class StockLedger:
    """
    All stock changes pass through this service.

    Unlike the catalog and registry services, apply_movement owns
    its transaction: it commits on success and rolls back on every
    failure, because a conflicting write can only be retried from
    a clean transaction. Hand it a session with no pending work.
    The remaining operations leave the commit to the caller.
    """

    def __init__(
        self,
        db: Session,
        max_retries: int | None = None,
        retry_backoff: float | None = None,
    ):
        settings = get_settings()
        self.db = db
        self.max_retries = max(
            1, max_retries if max_retries is not None else settings.LEDGER_MAX_RETRIES
        )
        self.retry_backoff = (
            retry_backoff if retry_backoff is not None
            else settings.LEDGER_RETRY_BACKOFF
        )

    # --- Writes ---

    def apply_movement(
        self,
        item_id: uuid.UUID,
        item_kind: SupplyKind,
        printer_id: uuid.UUID | None,
        quantity_delta: int,
    ) -> StockUpdate:
        """
        Append a movement and move the item's stock by quantity_delta.

        Checked before anything is written:
        - quantity_delta is not zero and fits the stock column (both
          checked before any store access)
        - the item exists and is of item_kind
        - the printer exists, when one is given
        - the resulting stock is not negative and fits the column

        A write that loses a race against a concurrent update of the
        same item is rolled back, re-read and resubmitted up to
        max_retries times before ConcurrencyConflict is raised.
        """
        if quantity_delta == 0:
            raise ZeroDelta(item_id)
        if not INT32_MIN <= quantity_delta <= INT32_MAX:
            raise QuantityOutOfRange(item_id, quantity_delta)

        for attempt in range(1, self.max_retries + 1):
            try:
                result = self._apply_once(
                    item_id, item_kind, printer_id, quantity_delta
                )
                self.db.commit()
            except SupplyLedgerError as e:
                self.db.rollback()
                logger.info(
                    "Movement rejected for %s (delta %+d): %s",
                    item_id, quantity_delta, e.code,
                )
                raise
            except (StaleDataError, DBAPIError) as e:
                self.db.rollback()
                if is_conflict(e):
                    logger.warning(
                        "Stock update conflict on %s (attempt %d/%d)",
                        item_id, attempt, self.max_retries,
                    )
                    if attempt < self.max_retries and self.retry_backoff:
                        time.sleep(self.retry_backoff * attempt)
                    continue
                if isinstance(e, (OperationalError, InterfaceError)):
                    logger.error("Stock store unavailable: %s", e)
                    raise StoreUnavailable(str(e.orig)) from e
                # DataError, ProgrammingError and the like are not outages
                logger.error("Stock update for %s failed: %s", item_id, e)
                raise
            except Exception:
                self.db.rollback()
                raise

            logger.info(
                "Applied movement %s to %s: delta %+d, stock now %d",
                result.movement.external_id, item_id,
                quantity_delta, result.stock,
            )
            return result

        logger.error(
            "Giving up on stock update for %s after %d attempts",
            item_id, self.max_retries,
        )
        raise ConcurrencyConflict(item_id, self.max_retries)

    def _lock_item(self, item_id: uuid.UUID) -> SupplyItem | None:
        """
        Load the item for a read-modify-write.

        FOR UPDATE holds the row lock on PostgreSQL until commit, so a
        second writer waits and then reads the committed stock.
        populate_existing makes sure that re-read replaces whatever the
        identity map still holds. SQLite ignores FOR UPDATE; there the
        version check on flush catches the race instead.
        """
        return self.db.execute(
            select(SupplyItem)
            .where(SupplyItem.id == item_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def _apply_once(
        self,
        item_id: uuid.UUID,
        item_kind: SupplyKind,
        printer_id: uuid.UUID | None,
        quantity_delta: int,
    ) -> StockUpdate:
        item = self._lock_item(item_id)
        if item is None or item.kind != item_kind:
            raise ItemNotFound(item_id, item_kind)

        if printer_id is not None and self.db.get(Printer, printer_id) is None:
            raise PrinterNotFound(printer_id)

        new_stock = item.stock + quantity_delta
        if new_stock < 0:
            raise InsufficientStock(item.id, item.stock, quantity_delta)
        if new_stock > INT32_MAX:
            raise QuantityOutOfRange(item.id, quantity_delta, item.stock)

        movement = Movement(
            printer_ref=printer_id,
            item_ref=item.id,
            item_kind=item.kind,
            quantity_delta=quantity_delta,
        )
        self.db.add(movement)
        # The UPDATE carries WHERE version = <version read above>
        item.stock = new_stock
        self.db.flush()

        return StockUpdate(item_id=item.id, stock=new_stock, movement=movement)

    def retire_reference(
        self, entity_kind: ReferenceKind, entity_id: uuid.UUID
    ) -> int:
        """
        Clear every movement reference to an entity about to be deleted.

        Must run inside the deletion's transaction, before the row is
        deleted. quantity_delta and every stock value are left alone.
        Returns the number of movements touched.
        """
        if entity_kind == ReferenceKind.SUPPLY_ITEM:
            column = Movement.item_ref
        else:
            column = Movement.printer_ref

        result = self.db.execute(
            update(Movement)
            .where(column == entity_id)
            .values({column: None})
        )
        logger.info(
            "Retired %d movement reference(s) to %s %s",
            result.rowcount, entity_kind.value, entity_id,
        )
        return result.rowcount

    # --- Reads ---

    def current_stock(self, item_id: uuid.UUID) -> int:
        """
        Return the item's stock.

        Stock is a materialized aggregate kept consistent by
        apply_movement; nothing is replayed here.
        """
        stock = self.db.execute(
            select(SupplyItem.stock).where(SupplyItem.id == item_id)
        ).scalar_one_or_none()

        if stock is None:
            raise ItemNotFound(item_id)
        return stock

    def get_movement(self, movement_id: uuid.UUID) -> Movement:
        movement = self.db.execute(
            select(Movement).where(Movement.external_id == movement_id)
        ).scalar_one_or_none()

        if movement is None:
            raise MovementNotFound(movement_id)
        return movement

    def list_movements(
        self, filters: MovementFilter | None = None
    ) -> MovementSequence:
        """Movements matching filters, oldest first, ties in insertion order."""
        filters = filters or MovementFilter()
        statement = select(Movement)

        if filters.item_id is not None:
            statement = statement.where(Movement.item_ref == filters.item_id)
        if filters.printer_id is not None:
            statement = statement.where(
                Movement.printer_ref == filters.printer_id
            )
        if filters.item_kind is not None:
            statement = statement.where(Movement.item_kind == filters.item_kind)
        if filters.created_from is not None:
            statement = statement.where(
                Movement.created_at >= filters.created_from
            )
        if filters.created_to is not None:
            statement = statement.where(Movement.created_at < filters.created_to)

        statement = statement.order_by(
            Movement.created_at.asc(), Movement.id.asc()
        )
        return MovementSequence(self.db, statement)

    def count_movements(self, item_kind: SupplyKind | None = None) -> int:
        statement = select(func.count(Movement.id))
        if item_kind is not None:
            statement = statement.where(Movement.item_kind == item_kind)
        return self.db.execute(statement).scalar_one()

    def verify_stock(self, item_id: uuid.UUID) -> dict:
        """
        Recompute an item's stock from its baseline and surviving movements.

        Should always report is_consistent=True; anything else means
        stock was written outside apply_movement.
        """
        item = self.db.get(SupplyItem, item_id, populate_existing=True)
        if item is None:
            raise ItemNotFound(item_id)

        movement_total = self.db.execute(
            select(func.coalesce(func.sum(Movement.quantity_delta), 0))
            .where(Movement.item_ref == item_id)
        ).scalar_one()

        return {
            "item_id": item.id,
            "stock": item.stock,
            "initial_stock": item.initial_stock,
            "movement_total": int(movement_total),
            "is_consistent": item.stock == item.initial_stock + movement_total,
        }

"""
Ledger Service — The single public interface for all stock operations.

Usage:
    from stockledger import ledger, LedgerError

    ledger.receive('ITM002', 'WH001', Decimal('1000'), unit_cost=Decimal('25000'))
    ledger.reserve('ITM002', 'WH001', Decimal('750'))
    ledger.get_balance('ITM002', 'WH001').quantity_available  # 250

Items and warehouses may be passed as instances, primary keys or codes.
"""

from decimal import Decimal
from typing import Iterator

from stockledger.models.movement import Movement
from stockledger.models.stock_record import StockRecord
from stockledger.services.ledger import LedgerStore
from stockledger.services.movements import Balance, MovementRecorder
from stockledger.services.replenishment import StockAlert, check_low_stock, scan_low_stock
from stockledger.services.reservations import StockReservations
from stockledger.services.transfers import transfer


class Ledger:
    """
    Single interface for all stock operations.

    Parameter convention: (item, warehouse, quantity, ...)

    IMPORTANT: All state-changing methods go through LedgerStore.apply_delta,
    which locks the (item, warehouse) row for the whole operation.
    """

    # ══════════════════════════════════════════════════════════════
    # QUERIES (read-only, no locking)
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def get_balance(cls, item, warehouse) -> StockRecord:
        """Current record. Raises NotFound if the pair has no stock record."""
        return LedgerStore.get_balance(item, warehouse)

    @classmethod
    def scan_low_stock(cls, warehouse=None, *, after: StockAlert | None = None,
                       chunk_size: int | None = None) -> Iterator[StockAlert]:
        """Lazy alerts for available <= reorder point, most deficient first."""
        return scan_low_stock(warehouse, after=after, chunk_size=chunk_size)

    @classmethod
    def replay(cls, item, warehouse) -> list[Movement]:
        """Movement log of the pair, in sequence order."""
        return MovementRecorder.replay(item, warehouse)

    # ══════════════════════════════════════════════════════════════
    # RESERVATIONS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def reserve(cls, item, warehouse, quantity: Decimal, **kwargs) -> StockRecord:
        return StockReservations.reserve(item, warehouse, quantity, **kwargs)

    @classmethod
    def release(cls, item, warehouse, quantity: Decimal, **kwargs) -> StockRecord:
        return StockReservations.release(item, warehouse, quantity, **kwargs)

    @classmethod
    def commit_issue(cls, item, warehouse, quantity: Decimal, **kwargs) -> StockRecord:
        return StockReservations.commit_issue(item, warehouse, quantity, **kwargs)

    # ══════════════════════════════════════════════════════════════
    # MOVEMENTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def receive(cls, item, warehouse, quantity: Decimal,
                unit_cost: Decimal | None = None, **kwargs) -> StockRecord:
        return StockReservations.receive(item, warehouse, quantity, unit_cost, **kwargs)

    @classmethod
    def issue(cls, item, warehouse, quantity: Decimal, **kwargs) -> StockRecord:
        return StockReservations.issue(item, warehouse, quantity, **kwargs)

    @classmethod
    def adjust(cls, item, warehouse, new_quantity: Decimal, reason: str,
               **kwargs) -> StockRecord | None:
        return StockReservations.adjust(item, warehouse, new_quantity, reason, **kwargs)

    @classmethod
    def transfer(cls, item, source, destination, quantity: Decimal,
                 **kwargs) -> tuple[StockRecord, StockRecord]:
        return transfer(item, source, destination, quantity, **kwargs)

    # ══════════════════════════════════════════════════════════════
    # MAINTENANCE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def set_levels(cls, item, warehouse, **levels) -> StockRecord:
        """Set min_level / max_level / reorder_point."""
        return LedgerStore.set_levels(item, warehouse, **levels)

    @classmethod
    def deactivate(cls, item, warehouse) -> StockRecord:
        return LedgerStore.deactivate(item, warehouse)

    @classmethod
    def reconcile(cls, item, warehouse, dry_run: bool = False) -> tuple[Balance, bool]:
        """Rebuild balances from the log; fix the record on drift."""
        return MovementRecorder.reconcile(item, warehouse, dry_run=dry_run)

    @classmethod
    def check_low_stock(cls, warehouse=None) -> list[StockAlert]:
        """Scan and send low_stock_detected for every alert."""
        return check_low_stock(warehouse)

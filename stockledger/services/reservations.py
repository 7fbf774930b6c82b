"""
Reservation manager — reserve, release, commit and receive.

Every check runs inside LedgerStore.apply_delta() against the row-locked
record, so there is no window between checking availability and writing.
Operations do not deduplicate: callers that retry pass a ``reference``,
which is recorded on the Movement.
"""

from decimal import Decimal

from django.db import transaction

from stockledger.exceptions import (
    InsufficientAvailable,
    InvalidQuantity,
    NotFound,
    OverRelease,
    ReasonRequired,
    ReservationMismatch,
)
from stockledger.models.enums import MovementType
from stockledger.models.stock_record import StockRecord, quantize
from stockledger.services.identity import key_codes, resolve_item, resolve_warehouse
from stockledger.services.ledger import LedgerStore


def positive_quantity(quantity, item, warehouse) -> Decimal:
    quantity = quantize(quantity)
    if quantity <= 0:
        item_code, warehouse_code = key_codes(item, warehouse)
        raise InvalidQuantity(item=item_code, warehouse=warehouse_code, requested=quantity)
    return quantity


def _context(record: StockRecord, quantity: Decimal) -> dict:
    item_code, warehouse_code = record.key
    return {
        'item': item_code,
        'warehouse': warehouse_code,
        'requested': quantity,
        **record.balances(),
    }


class StockReservations:
    """Reservation lifecycle and receipts."""

    @classmethod
    def reserve(cls, item, warehouse, quantity, *, actor=None,
                reason='Reservation', reference='') -> StockRecord:
        """
        Earmark available stock.

        Raises:
            InvalidQuantity: quantity <= 0
            InsufficientAvailable: quantity > available at lock time
        """
        quantity = positive_quantity(quantity, item, warehouse)

        def validate(record):
            if record.quantity_available < quantity:
                raise InsufficientAvailable(**_context(record, quantity))

        return LedgerStore.apply_delta(
            item, warehouse,
            reserved_delta=quantity,
            movement_type=MovementType.RESERVE,
            actor=actor, reason=reason, reference=reference,
            validate=validate,
        )

    @classmethod
    def release(cls, item, warehouse, quantity, *, actor=None,
                reason='Release', reference='') -> StockRecord:
        """
        Return reserved stock to available.

        Raises:
            InvalidQuantity: quantity <= 0
            OverRelease: quantity > reserved
        """
        quantity = positive_quantity(quantity, item, warehouse)

        def validate(record):
            if quantity > record.quantity_reserved:
                raise OverRelease(**_context(record, quantity))

        return LedgerStore.apply_delta(
            item, warehouse,
            reserved_delta=-quantity,
            movement_type=MovementType.RELEASE,
            actor=actor, reason=reason, reference=reference,
            validate=validate,
        )

    @classmethod
    def commit_issue(cls, item, warehouse, quantity, *, actor=None,
                     reason='Reserved issue', reference='') -> StockRecord:
        """
        Turn a reservation into a withdrawal: on_hand and reserved both drop.

        Raises:
            InvalidQuantity: quantity <= 0
            ReservationMismatch: quantity > reserved
        """
        quantity = positive_quantity(quantity, item, warehouse)

        def validate(record):
            if quantity > record.quantity_reserved:
                raise ReservationMismatch(**_context(record, quantity))

        return LedgerStore.apply_delta(
            item, warehouse,
            on_hand_delta=-quantity,
            reserved_delta=-quantity,
            movement_type=MovementType.ISSUE,
            actor=actor, reason=reason, reference=reference,
            validate=validate,
            metadata={'from_reservation': True},
        )

    @classmethod
    def receive(cls, item, warehouse, quantity, unit_cost=None, *, actor=None,
                reason='Receipt', reference='') -> StockRecord:
        """
        Stock entry. Creates the record on first receipt.

        With a ``unit_cost`` the moving average is recomputed in the same
        transaction as the quantity change.

        Raises:
            InvalidQuantity: quantity <= 0 or unit_cost < 0
        """
        quantity = positive_quantity(quantity, item, warehouse)
        if unit_cost is not None:
            unit_cost = quantize(unit_cost)
            if unit_cost < 0:
                item_code, warehouse_code = key_codes(item, warehouse)
                raise InvalidQuantity(item=item_code, warehouse=warehouse_code, unit_cost=unit_cost)

        return LedgerStore.apply_delta(
            item, warehouse,
            on_hand_delta=quantity,
            movement_type=MovementType.RECEIPT,
            actor=actor, reason=reason, reference=reference,
            unit_cost=unit_cost,
        )

    @classmethod
    def issue(cls, item, warehouse, quantity, *, actor=None,
              reason='Issue', reference='') -> StockRecord:
        """
        Unreserved withdrawal. Reserved stock is never touched.

        Raises:
            InvalidQuantity: quantity <= 0
            InsufficientAvailable: quantity > available
        """
        quantity = positive_quantity(quantity, item, warehouse)

        def validate(record):
            if record.quantity_available < quantity:
                raise InsufficientAvailable(**_context(record, quantity))

        return LedgerStore.apply_delta(
            item, warehouse,
            on_hand_delta=-quantity,
            movement_type=MovementType.ISSUE,
            actor=actor, reason=reason, reference=reference,
            validate=validate,
        )

    @classmethod
    def adjust(cls, item, warehouse, new_quantity, reason, *, actor=None,
               reference='') -> StockRecord | None:
        """
        Inventory count correction.

        Computes delta = new_quantity - on_hand under the row lock.

        Returns:
            Updated record, or None when the count already matches

        Raises:
            ReasonRequired: Empty reason
            InvalidQuantity: new_quantity < 0
            InvariantViolation: new_quantity below the reserved quantity
        """
        item = resolve_item(item)
        warehouse = resolve_warehouse(warehouse)

        if not reason:
            raise ReasonRequired(item=item.code, warehouse=warehouse.code)

        new_quantity = quantize(new_quantity)
        if new_quantity < 0:
            raise InvalidQuantity(item=item.code, warehouse=warehouse.code, requested=new_quantity)

        with transaction.atomic():
            if new_quantity == 0:
                # counting zero on a pair never stocked changes nothing
                try:
                    record = LedgerStore.lock_existing(item, warehouse)
                except NotFound:
                    return None
            else:
                record = LedgerStore.lock(item, warehouse)
            delta = new_quantity - record.quantity_on_hand

            if delta == 0:
                return None

            return LedgerStore.apply_delta(
                record.item, record.warehouse,
                on_hand_delta=delta,
                movement_type=MovementType.ADJUSTMENT,
                actor=actor, reason=f"Adjustment: {reason}", reference=reference,
                metadata={'counted': str(new_quantity)},
            )

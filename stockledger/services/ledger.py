"""
Ledger store — the only writer of StockRecord balances.

Every mutation runs apply_delta(): one transaction, one row lock on the
(item, warehouse) record, invariant check, balance write and exactly one
Movement. Distinct keys never share a lock.
"""

import logging
from decimal import Decimal
from typing import Callable

from django.db import transaction
from django.utils import timezone

from stockledger.conf import ledger_settings
from stockledger.exceptions import InvalidQuantity, InvariantViolation, NotFound
from stockledger.models.enums import MovementType
from stockledger.models.stock_record import StockRecord, quantize
from stockledger.services.costing import apply_receipt
from stockledger.services.identity import key_codes, resolve_item, resolve_warehouse
from stockledger.services.movements import MovementRecorder

logger = logging.getLogger('stockledger')

ZERO = Decimal('0')


def _emit_low_stock(record: StockRecord) -> None:
    from stockledger.services.replenishment import StockAlert
    from stockledger.signals import notify_low_stock

    notify_low_stock(StockAlert.from_record(record))


class LedgerStore:
    """Per-(item, warehouse) balance store."""

    # ══════════════════════════════════════════════════════════════
    # READS (no locking)
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def get_balance(cls, item, warehouse) -> StockRecord:
        """
        Current record for an (item, warehouse) pair.

        Raises:
            NotFound: If the pair was never touched
        """
        item = resolve_item(item, active_only=False)
        warehouse = resolve_warehouse(warehouse, active_only=False)
        try:
            record = StockRecord.objects.for_key(item, warehouse).get()
        except StockRecord.DoesNotExist:
            raise NotFound(item=item.code, warehouse=warehouse.code) from None
        record.item, record.warehouse = item, warehouse
        return record

    @classmethod
    def get_or_create(cls, item, warehouse) -> StockRecord:
        """
        Record for the pair, created with zero balances on first touch.

        A soft-deactivated record is reactivated.
        """
        item = resolve_item(item)
        warehouse = resolve_warehouse(warehouse)
        record, created = StockRecord.objects.get_or_create(item=item, warehouse=warehouse)
        if not created and not record.is_active:
            record.is_active = True
            record.save(update_fields=['is_active', 'updated_at'])
        if created:
            logger.info(
                "stock.record.created",
                extra={"item": item.code, "warehouse": warehouse.code},
            )
        record.item, record.warehouse = item, warehouse
        return record

    # ══════════════════════════════════════════════════════════════
    # LOCKING
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def lock(cls, item, warehouse) -> StockRecord:
        """
        Row-lock the record for the pair, creating it if needed.

        Must be called inside transaction.atomic(). Only the StockRecord
        row is locked, never the item or warehouse rows. The returned
        record is always active; callers persist ``is_active`` on save.
        """
        record = cls.get_or_create(item, warehouse)
        locked = StockRecord.objects.select_for_update().get(pk=record.pk)
        if not locked.is_active:
            # deactivated after get_or_create read it
            locked.is_active = True
        locked.item, locked.warehouse = record.item, record.warehouse
        return locked

    @classmethod
    def lock_existing(cls, item, warehouse) -> StockRecord:
        """Like lock() but never creates. Raises NotFound."""
        record = cls.get_balance(item, warehouse)
        locked = StockRecord.objects.select_for_update().get(pk=record.pk)
        locked.item, locked.warehouse = record.item, record.warehouse
        return locked

    # ══════════════════════════════════════════════════════════════
    # MUTATIONS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def apply_delta(cls, item, warehouse, on_hand_delta=ZERO, reserved_delta=ZERO,
                    movement_type=MovementType.ADJUSTMENT, *,
                    actor: str | None = None, reason: str = '', reference: str = '',
                    unit_cost: Decimal | None = None,
                    validate: Callable[[StockRecord], None] | None = None,
                    metadata: dict | None = None) -> StockRecord:
        """
        Apply balance deltas atomically and append one Movement.

        Steps, all in one transaction:
            1. Lock the record (created with zero balances if new)
            2. Run ``validate(record)`` against the locked balances
            3. Compute new balances, reject invariant breaks
            4. Run the Cost Accumulator when ``unit_cost`` is given
            5. Persist balances and append the Movement

        Raises:
            InvalidQuantity: Both deltas are zero, or ``unit_cost`` on anything
                but a RECEIPT that adds stock
            InvariantViolation: on_hand < 0, reserved < 0 or reserved > on_hand
            NotFound: Unknown/inactive item or warehouse
            Anything ``validate`` raises

        Any error rolls back the whole operation: no Movement is written.
        """
        on_hand_delta = quantize(on_hand_delta)
        reserved_delta = quantize(reserved_delta)

        if on_hand_delta == 0 and reserved_delta == 0:
            item_code, warehouse_code = key_codes(item, warehouse)
            raise InvalidQuantity(
                item=item_code,
                warehouse=warehouse_code,
                on_hand_delta=on_hand_delta,
                reserved_delta=reserved_delta,
            )

        if unit_cost is not None and (movement_type != MovementType.RECEIPT or on_hand_delta <= 0):
            item_code, warehouse_code = key_codes(item, warehouse)
            raise InvalidQuantity(
                item=item_code,
                warehouse=warehouse_code,
                movement_type=str(movement_type),
                on_hand_delta=on_hand_delta,
                unit_cost=unit_cost,
            )

        with transaction.atomic():
            record = cls.lock(item, warehouse)
            item_code, warehouse_code = record.key

            if validate is not None:
                validate(record)

            new_on_hand = record.quantity_on_hand + on_hand_delta
            new_reserved = record.quantity_reserved + reserved_delta

            if new_on_hand < 0 or new_reserved < 0 or new_reserved > new_on_hand:
                raise InvariantViolation(
                    item=item_code,
                    warehouse=warehouse_code,
                    on_hand_delta=on_hand_delta,
                    reserved_delta=reserved_delta,
                    **record.balances(),
                )

            if unit_cost is not None:
                unit_cost = quantize(unit_cost)
                apply_receipt(record, on_hand_delta, unit_cost)

            now = timezone.now()
            record.quantity_on_hand = new_on_hand
            record.quantity_reserved = new_reserved
            record.last_sequence += 1
            record.last_movement_at = now
            if movement_type == MovementType.RECEIPT:
                record.last_receipt_at = now
            elif movement_type == MovementType.ISSUE:
                record.last_issue_at = now
            record.save(update_fields=[
                'quantity_on_hand', 'quantity_reserved', 'unit_cost', 'average_cost',
                'last_sequence', 'is_active', 'last_movement_at', 'last_receipt_at', 'last_issue_at',
                'updated_at',
            ])

            movement = MovementRecorder.append(
                record,
                movement_type,
                on_hand_delta,
                reserved_delta,
                actor=actor or ledger_settings.DEFAULT_ACTOR,
                reason=reason,
                reference=reference,
                unit_cost=unit_cost,
                metadata=metadata,
            )

            if ledger_settings.ALERT_ON_MOVEMENT and record.is_below_reorder_point:
                transaction.on_commit(lambda: _emit_low_stock(record))

        logger.info(
            "stock.movement",
            extra={
                "item": item_code,
                "warehouse": warehouse_code,
                "movement_type": str(movement_type),
                "sequence": movement.sequence,
                "on_hand_delta": str(on_hand_delta),
                "reserved_delta": str(reserved_delta),
                "on_hand": str(record.quantity_on_hand),
                "reserved": str(record.quantity_reserved),
            },
        )
        return record

    @classmethod
    def set_levels(cls, item, warehouse, *, min_level=None, max_level=None,
                   reorder_point=None) -> StockRecord:
        """
        Update planning parameters. Not a movement: balances are untouched.

        Raises:
            InvalidQuantity: Negative level, or min_level above a non-zero max_level
        """
        with transaction.atomic():
            record = cls.lock(item, warehouse)
            fields = {
                'min_level': min_level,
                'max_level': max_level,
                'reorder_point': reorder_point,
            }
            for name, value in fields.items():
                if value is None:
                    continue
                value = quantize(value)
                if value < 0:
                    raise InvalidQuantity(
                        item=record.item.code, warehouse=record.warehouse.code,
                        **{name: value},
                    )
                setattr(record, name, value)

            if record.max_level > 0 and record.min_level > record.max_level:
                raise InvalidQuantity(
                    item=record.item.code,
                    warehouse=record.warehouse.code,
                    min_level=record.min_level,
                    max_level=record.max_level,
                )

            record.save(update_fields=[
                'min_level', 'max_level', 'reorder_point', 'is_active', 'updated_at',
            ])
            return record

    @classmethod
    def deactivate(cls, item, warehouse) -> StockRecord:
        """
        Soft-deactivate an empty record. Records are never deleted.

        Raises:
            InvariantViolation: Stock is still on hand or reserved
        """
        with transaction.atomic():
            record = cls.lock_existing(item, warehouse)
            if record.quantity_on_hand != 0 or record.quantity_reserved != 0:
                raise InvariantViolation(
                    item=record.item.code,
                    warehouse=record.warehouse.code,
                    **record.balances(),
                )
            record.is_active = False
            record.save(update_fields=['is_active', 'updated_at'])

        logger.info(
            "stock.record.deactivated",
            extra={"item": record.item.code, "warehouse": record.warehouse.code},
        )
        return record

    @classmethod
    def restore(cls, record: StockRecord, balance) -> StockRecord:
        """
        Overwrite stored balances with ones rebuilt from the movement log.

        Called by MovementRecorder.reconcile() on a record it has locked.
        """
        record.quantity_on_hand = balance.on_hand
        record.quantity_reserved = balance.reserved
        record.average_cost = balance.average_cost
        record.last_sequence = balance.last_sequence
        record.save(update_fields=[
            'quantity_on_hand', 'quantity_reserved', 'average_cost',
            'last_sequence', 'updated_at',
        ])
        return record

"""
Movement recorder — append-only log and balance reconstruction.

append() is the only write path and runs inside LedgerStore's transaction.
replay()/fold() rebuild balances from the log for reconciliation and audit.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from django.db import transaction

from stockledger.models.enums import MovementType
from stockledger.models.movement import Movement
from stockledger.models.stock_record import StockRecord
from stockledger.services.costing import weighted_average

logger = logging.getLogger('stockledger')


@dataclass(frozen=True)
class Balance:
    """Balances rebuilt from a movement log."""

    on_hand: Decimal = Decimal('0')
    reserved: Decimal = Decimal('0')
    average_cost: Decimal | None = None
    last_sequence: int = 0

    @property
    def available(self) -> Decimal:
        return self.on_hand - self.reserved

    def matches(self, record: StockRecord) -> bool:
        """Do the stored balances agree with this reconstruction?"""
        return (
            record.quantity_on_hand == self.on_hand
            and record.quantity_reserved == self.reserved
            and record.average_cost == self.average_cost
            and record.last_sequence == self.last_sequence
        )


class MovementRecorder:
    """Append and replay movements."""

    @classmethod
    def append(cls, record: StockRecord, movement_type, on_hand_delta: Decimal,
               reserved_delta: Decimal, *, actor: str, reason: str = '',
               reference: str = '', unit_cost: Decimal | None = None,
               metadata: dict | None = None) -> Movement:
        """
        Append one movement for ``record``.

        ``record`` must already hold the new balances and the new
        ``last_sequence`` (LedgerStore assigns both under the row lock).
        """
        return Movement.objects.create(
            record=record,
            sequence=record.last_sequence,
            movement_type=movement_type,
            on_hand_delta=on_hand_delta,
            reserved_delta=reserved_delta,
            on_hand_after=record.quantity_on_hand,
            reserved_after=record.quantity_reserved,
            unit_cost=unit_cost,
            average_cost_after=record.average_cost,
            actor=actor,
            reason=reason,
            reference=reference,
            metadata=metadata or {},
        )

    @classmethod
    def replay(cls, item, warehouse) -> list[Movement]:
        """
        Movements of an (item, warehouse) pair in sequence order.

        Raises:
            NotFound: If the pair has no stock record
        """
        from stockledger.services.ledger import LedgerStore

        record = LedgerStore.get_balance(item, warehouse)
        return list(record.movements.order_by('sequence'))

    @classmethod
    def fold(cls, movements: Iterable[Movement]) -> Balance:
        """
        Rebuild balances by folding deltas in order.

        Average cost is recomputed from RECEIPT entries that carry a
        unit cost, exactly as the Cost Accumulator does on the way in.
        """
        on_hand = Decimal('0')
        reserved = Decimal('0')
        average = None
        sequence = 0

        for movement in movements:
            if movement.movement_type == MovementType.RECEIPT and movement.unit_cost is not None:
                average = weighted_average(on_hand, average, movement.on_hand_delta, movement.unit_cost)
            on_hand += movement.on_hand_delta
            reserved += movement.reserved_delta
            sequence = movement.sequence

        return Balance(
            on_hand=on_hand,
            reserved=reserved,
            average_cost=average,
            last_sequence=sequence,
        )

    @classmethod
    def reconcile(cls, item, warehouse, dry_run: bool = False) -> tuple[Balance, bool]:
        """
        Compare a record with its log and restore the log's balances on drift.

        Use for:
        - Integrity audit
        - Correction after detected inconsistency

        Returns:
            (rebuilt balance, whether the stored record had drifted)
        """
        from stockledger.services.ledger import LedgerStore

        with transaction.atomic():
            record = LedgerStore.lock_existing(item, warehouse)
            balance = cls.fold(record.movements.order_by('sequence'))
            drifted = not balance.matches(record)

            if drifted:
                logger.warning(
                    "stock.reconcile.drift",
                    extra={
                        "item": record.item.code,
                        "warehouse": record.warehouse.code,
                        "stored_on_hand": str(record.quantity_on_hand),
                        "stored_reserved": str(record.quantity_reserved),
                        "log_on_hand": str(balance.on_hand),
                        "log_reserved": str(balance.reserved),
                        "dry_run": dry_run,
                    },
                )
                if not dry_run:
                    LedgerStore.restore(record, balance)

        return balance, drifted

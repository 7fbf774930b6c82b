"""
Stock transfers between warehouses.

There is no lock spanning two keys. A transfer is two single-key
operations: debit the source, then credit the destination. If the credit
fails, the source is re-credited with a compensating movement and the
original error propagates.
"""

import logging

from stockledger.exceptions import LedgerError
from stockledger.models.enums import MovementType
from stockledger.models.stock_record import StockRecord
from stockledger.services.identity import resolve_item, resolve_warehouse
from stockledger.services.ledger import LedgerStore
from stockledger.services.reservations import StockReservations, positive_quantity

logger = logging.getLogger('stockledger')


def transfer(item, source, destination, quantity, *, actor=None,
             reason='Transfer', reference='') -> tuple[StockRecord, StockRecord]:
    """
    Move available stock from ``source`` to ``destination``.

    The destination receives at the source's valuation cost, so the
    moving average travels with the goods.

    Returns:
        (source record, destination record)

    Raises:
        LedgerError('SAME_WAREHOUSE'): source == destination
        InsufficientAvailable: Not enough available at the source
        Whatever the credit raised, after the source was compensated
    """
    item = resolve_item(item)
    source = resolve_warehouse(source)
    destination = resolve_warehouse(destination)
    quantity = positive_quantity(quantity, item.code, source.code)

    if source.pk == destination.pk:
        raise LedgerError('SAME_WAREHOUSE', item=item.code, warehouse=source.code)

    label = f"{reason} {source.code} -> {destination.code}"

    debited = StockReservations.issue(
        item, source, quantity,
        actor=actor, reason=label, reference=reference,
    )
    cost = debited.average_cost if debited.average_cost is not None else debited.unit_cost

    try:
        credited = StockReservations.receive(
            item, destination, quantity, cost,
            actor=actor, reason=label, reference=reference,
        )
    except Exception:
        logger.warning(
            "stock.transfer.compensated",
            extra={
                "item": item.code,
                "source": source.code,
                "destination": destination.code,
                "qty": str(quantity),
            },
        )
        LedgerStore.apply_delta(
            item, source,
            on_hand_delta=quantity,
            movement_type=MovementType.RECEIPT,
            actor=actor,
            reason=f"Compensation: {label}",
            reference=reference,
            metadata={'compensates_sequence': debited.last_sequence},
        )
        raise

    logger.info(
        "stock.transfer",
        extra={
            "item": item.code,
            "source": source.code,
            "destination": destination.code,
            "qty": str(quantity),
        },
    )
    return debited, credited

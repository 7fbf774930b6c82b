"""
Cost accumulation — weighted moving average on receipts.

Issues never change the average cost; they only reduce total value
through the quantity term.
"""

from decimal import Decimal

from stockledger.models.stock_record import StockRecord, quantize


def weighted_average(on_hand_before: Decimal, average_before: Decimal | None,
                     quantity: Decimal, unit_cost: Decimal) -> Decimal:
    """
    New moving average after receiving ``quantity`` at ``unit_cost``.

        (on_hand_before * average_before + quantity * unit_cost)
        / (on_hand_before + quantity)

    ``average_before`` falls back to ``unit_cost`` when there was no stock
    or no prior average.
    """
    if on_hand_before <= 0 or average_before is None:
        average_before = unit_cost

    total_quantity = on_hand_before + quantity
    if total_quantity <= 0:
        return quantize(unit_cost)

    total_value = on_hand_before * average_before + quantity * unit_cost
    return quantize(total_value / total_quantity)


def apply_receipt(record: StockRecord, quantity: Decimal, unit_cost: Decimal) -> Decimal:
    """
    Update ``record`` costs for a receipt and return the new average.

    Must run on the row-locked record, before its on-hand quantity is
    incremented, inside the same transaction as the quantity change.
    The caller persists the record.
    """
    new_average = weighted_average(
        record.quantity_on_hand,
        record.average_cost,
        quantity,
        unit_cost,
    )
    record.average_cost = new_average
    record.unit_cost = quantize(unit_cost)
    return new_average

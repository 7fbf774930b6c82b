"""
Stock Ledger — Inventory quantity ledger for Django.

Tracks, reserves and replenishes item quantities per warehouse with
row-level locking and an immutable movement log.

Usage:
    from stockledger import ledger, LedgerError

    ledger.receive('ITM002', 'WH001', 1000, unit_cost=25000)
    ledger.reserve('ITM002', 'WH001', 750)
    ledger.get_balance('ITM002', 'WH001').quantity_available  # 250
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ledger':
        from stockledger.service import Ledger
        return Ledger
    elif name == 'LedgerError':
        from stockledger.exceptions import LedgerError
        return LedgerError
    elif name == 'Item':
        from stockledger.models.item import Item
        return Item
    elif name == 'Warehouse':
        from stockledger.models.warehouse import Warehouse
        return Warehouse
    elif name == 'StockRecord':
        from stockledger.models.stock_record import StockRecord
        return StockRecord
    elif name == 'Movement':
        from stockledger.models.movement import Movement
        return Movement
    elif name == 'MovementType':
        from stockledger.models.enums import MovementType
        return MovementType
    elif name == 'StockAlert':
        from stockledger.services.replenishment import StockAlert
        return StockAlert
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ledger',
    'LedgerError',
    'Item',
    'Warehouse',
    'StockRecord',
    'Movement',
    'MovementType',
    'StockAlert',
]

__version__ = '0.1.0'

"""
Ledger services — modular organization of stock operations.

    from stockledger.services import LedgerStore, StockReservations, MovementRecorder
"""

from stockledger.services.ledger import LedgerStore
from stockledger.services.movements import Balance, MovementRecorder
from stockledger.services.replenishment import StockAlert, check_low_stock, scan_low_stock
from stockledger.services.reservations import StockReservations
from stockledger.services.transfers import transfer

__all__ = [
    'LedgerStore',
    'MovementRecorder',
    'Balance',
    'StockReservations',
    'StockAlert',
    'scan_low_stock',
    'check_low_stock',
    'transfer',
]

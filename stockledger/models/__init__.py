"""
Stock Ledger Models.

Core models for the inventory ledger:
- Item: Catalog identity (external, read-only to the ledger)
- Warehouse: Location identity (external, read-only to the ledger)
- StockRecord: On-hand/reserved balances per (item, warehouse)
- Movement: Immutable log of balance changes
"""

from stockledger.models.enums import ItemStatus, ItemType, MovementType
from stockledger.models.item import Item
from stockledger.models.movement import Movement
from stockledger.models.stock_record import StockRecord
from stockledger.models.warehouse import Warehouse

__all__ = [
    'ItemType',
    'ItemStatus',
    'MovementType',
    'Item',
    'Warehouse',
    'StockRecord',
    'Movement',
]

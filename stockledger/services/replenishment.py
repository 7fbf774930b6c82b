"""
Replenishment monitor — detect reorder-point breaches.

Usage:
    from stockledger.services.replenishment import scan_low_stock, check_low_stock

    # Lazy, most deficient first
    for alert in scan_low_stock('WH001'):
        ...

    # Run periodically (celery beat, cron): scans and sends low_stock_detected
    alerts = check_low_stock()

Reads take no locks. An alert built from a slightly stale row is acceptable:
the next scan or movement corrects it, and ledger state is never touched.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterator

from django.db.models import Q

from stockledger.conf import ledger_settings
from stockledger.models.stock_record import StockRecord
from stockledger.services.identity import resolve_warehouse
from stockledger.signals import notify_low_stock


@dataclass(frozen=True)
class StockAlert:
    """A record whose available quantity is at or below its reorder point."""

    item: str
    warehouse: str
    quantity_available: Decimal
    reorder_point: Decimal
    deficit: Decimal
    record_id: int | None = None

    @classmethod
    def from_record(cls, record: StockRecord) -> 'StockAlert':
        available = record.quantity_available
        return cls(
            item=record.item.code,
            warehouse=record.warehouse.code,
            quantity_available=available,
            reorder_point=record.reorder_point,
            deficit=max(record.reorder_point - available, Decimal('0')),
            record_id=record.pk,
        )

    @property
    def sort_key(self) -> tuple[Decimal, int]:
        """Scan order: (available - reorder_point, record id)."""
        return self.quantity_available - self.reorder_point, self.record_id or 0

    def as_dict(self) -> dict[str, Any]:
        return {
            'item': self.item,
            'warehouse': self.warehouse,
            'quantity_available': str(self.quantity_available),
            'reorder_point': str(self.reorder_point),
            'deficit': str(self.deficit),
        }


def scan_low_stock(warehouse=None, *, after: StockAlert | None = None,
                   chunk_size: int | None = None) -> Iterator[StockAlert]:
    """
    Lazily yield alerts, most deficient first.

    Each call starts a fresh scan. Pass the last alert received as
    ``after`` to resume an interrupted scan where it stopped.

    Args:
        warehouse: Warehouse instance, pk or code (None = all warehouses)
        after: Resume after this alert's position in the ordering
        chunk_size: Rows fetched per database round-trip

    Raises:
        NotFound: Unknown warehouse (raised immediately, not on iteration)
    """
    qs = StockRecord.objects.active().low_stock().select_related('item', 'warehouse')

    if warehouse is not None:
        qs = qs.filter(warehouse=resolve_warehouse(warehouse, active_only=False))

    if after is not None:
        shortfall, pk = after.sort_key
        qs = qs.filter(Q(shortfall__gt=shortfall) | Q(shortfall=shortfall, pk__gt=pk))

    qs = qs.order_by('shortfall', 'pk')
    return _iterate(qs, chunk_size or ledger_settings.SCAN_CHUNK_SIZE)


def _iterate(qs, chunk_size: int) -> Iterator[StockAlert]:
    for record in qs.iterator(chunk_size=chunk_size):
        yield StockAlert.from_record(record)


def check_low_stock(warehouse=None) -> list[StockAlert]:
    """
    Scan and dispatch every alert through low_stock_detected.

    Returns:
        The alerts sent, most deficient first.
    """
    alerts = []
    for alert in scan_low_stock(warehouse):
        notify_low_stock(alert)
        alerts.append(alert)
    return alerts

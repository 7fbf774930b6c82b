"""
StockRecord model — Balances of one item at one warehouse.
"""

from decimal import ROUND_HALF_UP, Decimal

from django.db import models
from django.db.models import ExpressionWrapper, F, Q
from django.utils.translation import gettext_lazy as _

FOUR_PLACES = Decimal('0.0001')

QUANTITY = dict(max_digits=15, decimal_places=4)


def quantize(value) -> Decimal:
    """Coerce to Decimal with 4 decimal places (quantities and money alike)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)


class StockRecordQuerySet(models.QuerySet):
    """QuerySet with helpers for StockRecord queries."""

    def active(self):
        return self.filter(is_active=True)

    def for_key(self, item, warehouse):
        """Filter by (item, warehouse) pair."""
        return self.filter(item=item, warehouse=warehouse)

    def at_warehouse(self, warehouse):
        return self.filter(warehouse=warehouse)

    def with_availability(self):
        """
        Annotate ``available`` (on_hand - reserved) and ``shortfall``
        (available - reorder_point) in SQL.
        """
        decimal = models.DecimalField(**QUANTITY)
        return self.annotate(
            available=ExpressionWrapper(
                F('quantity_on_hand') - F('quantity_reserved'),
                output_field=decimal,
            ),
        ).annotate(
            shortfall=ExpressionWrapper(
                F('available') - F('reorder_point'),
                output_field=decimal,
            ),
        )

    def low_stock(self):
        """Records whose available quantity is at or below the reorder point."""
        return self.with_availability().filter(available__lte=F('reorder_point'))


class StockRecord(models.Model):
    """
    On-hand and reserved quantity of an item at a warehouse.

    Rules:
    - Exactly one record per (item, warehouse)
    - Balances change ONLY through LedgerStore.apply_delta()
    - 0 <= quantity_reserved <= quantity_on_hand, enforced under row lock
      and again by database check constraints
    - Never deleted: deactivate instead

    Available quantity and total value are derived on read and never stored.
    """

    item = models.ForeignKey(
        'stockledger.Item',
        on_delete=models.PROTECT,
        related_name='stock_records',
        verbose_name=_('Item'),
    )
    warehouse = models.ForeignKey(
        'stockledger.Warehouse',
        on_delete=models.PROTECT,
        related_name='stock_records',
        verbose_name=_('Warehouse'),
    )

    quantity_on_hand = models.DecimalField(
        default=Decimal('0'), verbose_name=_('On hand'), **QUANTITY,
    )
    quantity_reserved = models.DecimalField(
        default=Decimal('0'), verbose_name=_('Reserved'), **QUANTITY,
    )

    # Planning parameters
    min_level = models.DecimalField(default=Decimal('0'), verbose_name=_('Min level'), **QUANTITY)
    max_level = models.DecimalField(default=Decimal('0'), verbose_name=_('Max level'), **QUANTITY)
    reorder_point = models.DecimalField(
        default=Decimal('0'),
        verbose_name=_('Reorder point'),
        help_text=_('Replenishment alert when available <= this value'),
        **QUANTITY,
    )

    # Cost tracking
    unit_cost = models.DecimalField(
        null=True, blank=True, verbose_name=_('Last unit cost'), **QUANTITY,
    )
    average_cost = models.DecimalField(
        null=True, blank=True, verbose_name=_('Moving average cost'), **QUANTITY,
    )

    # Activity tracking
    last_movement_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Last movement'))
    last_receipt_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Last receipt'))
    last_issue_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Last issue'))

    last_sequence = models.PositiveBigIntegerField(
        default=0,
        verbose_name=_('Last movement sequence'),
    )
    is_active = models.BooleanField(default=True, verbose_name=_('Active'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockRecordQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock record')
        verbose_name_plural = _('Stock records')
        constraints = [
            models.UniqueConstraint(
                fields=['item', 'warehouse'],
                name='unique_stock_record_key',
            ),
            models.CheckConstraint(
                condition=Q(quantity_on_hand__gte=0),
                name='stock_on_hand_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(quantity_reserved__gte=0),
                name='stock_reserved_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(quantity_reserved__lte=F('quantity_on_hand')),
                name='stock_reserved_within_on_hand',
            ),
            models.CheckConstraint(
                condition=Q(min_level__gte=0, max_level__gte=0, reorder_point__gte=0),
                name='stock_levels_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['warehouse', 'reorder_point'], name='stock_warehouse_reorder_idx'),
        ]

    # ══════════════════════════════════════════════════════════════
    # DERIVED VALUES
    # ══════════════════════════════════════════════════════════════

    @property
    def quantity_available(self) -> Decimal:
        """Available for new reservations."""
        return self.quantity_on_hand - self.quantity_reserved

    @property
    def valuation_cost(self) -> Decimal:
        """Average cost, falling back to last unit cost."""
        if self.average_cost is not None:
            return self.average_cost
        if self.unit_cost is not None:
            return self.unit_cost
        return Decimal('0')

    @property
    def total_value(self) -> Decimal:
        return quantize(self.quantity_on_hand * self.valuation_cost)

    @property
    def is_below_reorder_point(self) -> bool:
        return self.quantity_available <= self.reorder_point

    @property
    def key(self) -> tuple[str, str]:
        """(item code, warehouse code), as used in errors and logs."""
        return self.item.code, self.warehouse.code

    def balances(self) -> dict[str, Decimal]:
        """Current balances, as attached to every ledger error."""
        return {
            'on_hand': self.quantity_on_hand,
            'reserved': self.quantity_reserved,
            'available': self.quantity_available,
        }

    def __str__(self) -> str:
        return (
            f"{self.item.code}@{self.warehouse.code}: "
            f"{self.quantity_on_hand} on hand, {self.quantity_reserved} reserved"
        )

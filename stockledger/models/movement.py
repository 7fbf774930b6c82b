"""
Movement model — Immutable, append-only log of stock changes.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import MovementType
from stockledger.models.stock_record import QUANTITY

IMMUTABLE_MESSAGE = (
    "Movements are immutable. "
    "To correct a balance, append a new ADJUSTMENT movement."
)


class MovementQuerySet(models.QuerySet):
    """Refuses bulk rewrites of the log."""

    def for_key(self, item, warehouse):
        return self.filter(record__item=item, record__warehouse=warehouse)

    def update(self, **kwargs):
        raise ValueError(IMMUTABLE_MESSAGE)

    def delete(self):
        raise ValueError(IMMUTABLE_MESSAGE)


class Movement(models.Model):
    """
    Immutable record of one stock-affecting operation.

    Rules:
    - NEVER update() or delete()
    - Corrections are new movements
    - Appended only by MovementRecorder, inside the store's transaction
    - ``sequence`` is 1, 2, 3... per StockRecord, assigned at append time

    Each entry carries both the deltas and the resulting balances, so the
    log alone is enough to rebuild a StockRecord (see MovementRecorder.fold).
    """

    record = models.ForeignKey(
        'stockledger.StockRecord',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Stock record'),
    )
    sequence = models.PositiveBigIntegerField(verbose_name=_('Sequence'))
    movement_type = models.CharField(
        max_length=20,
        choices=MovementType.choices,
        verbose_name=_('Type'),
    )

    on_hand_delta = models.DecimalField(
        verbose_name=_('On hand delta'),
        help_text=_('Positive = in, negative = out'),
        **QUANTITY,
    )
    reserved_delta = models.DecimalField(verbose_name=_('Reserved delta'), **QUANTITY)
    on_hand_after = models.DecimalField(verbose_name=_('On hand after'), **QUANTITY)
    reserved_after = models.DecimalField(verbose_name=_('Reserved after'), **QUANTITY)

    # Receipts only
    unit_cost = models.DecimalField(null=True, blank=True, verbose_name=_('Unit cost'), **QUANTITY)
    average_cost_after = models.DecimalField(
        null=True, blank=True, verbose_name=_('Average cost after'), **QUANTITY,
    )

    actor = models.CharField(max_length=150, verbose_name=_('Actor'))
    reason = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Reason'))
    reference = models.CharField(
        max_length=255,
        blank=True,
        default='',
        db_index=True,
        verbose_name=_('Reference'),
        help_text=_('External context, e.g. order number or deduplication key'),
    )
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadata'))
    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Timestamp'))

    objects = MovementQuerySet.as_manager()

    class Meta:
        verbose_name = _('Movement')
        verbose_name_plural = _('Movements')
        ordering = ['record', 'sequence']
        constraints = [
            models.UniqueConstraint(
                fields=['record', 'sequence'],
                name='unique_movement_sequence',
            ),
        ]
        indexes = [
            models.Index(fields=['movement_type', 'timestamp'], name='movement_type_time_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(IMMUTABLE_MESSAGE)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError(IMMUTABLE_MESSAGE)

    def __str__(self) -> str:
        sign = '+' if self.on_hand_delta > 0 else ''
        rsign = '+' if self.reserved_delta > 0 else ''
        return (
            f"#{self.sequence} {self.movement_type} "
            f"on_hand {sign}{self.on_hand_delta} reserved {rsign}{self.reserved_delta}"
        )

"""
Item model — catalog identity referenced by the ledger.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import ItemStatus, ItemType


class ItemQuerySet(models.QuerySet):

    def active(self):
        return self.filter(status=ItemStatus.ACTIVE)

    def loanable(self):
        return self.filter(is_loanable=True)


class Item(models.Model):
    """
    Catalog item.

    Created and maintained by catalog management. The ledger reads items
    as stock keys and never mutates them; per-warehouse cost lives on
    StockRecord, the fields below are the catalog's financial baseline.
    """

    code = models.CharField(
        unique=True,
        max_length=100,
        verbose_name=_('Code'),
    )
    name = models.CharField(max_length=255, verbose_name=_('Name'))
    description = models.TextField(blank=True, default='', verbose_name=_('Description'))
    item_type = models.CharField(
        max_length=50,
        choices=ItemType.choices,
        default=ItemType.STOCK,
        verbose_name=_('Type'),
    )
    usage_type = models.CharField(
        max_length=50,
        default='CONSUMABLE',
        verbose_name=_('Usage type'),
    )
    unit = models.CharField(max_length=50, default='PCS', verbose_name=_('Unit of measure'))

    # Tool/asset loans
    is_loanable = models.BooleanField(default=False, verbose_name=_('Loanable'))
    requires_return = models.BooleanField(default=False, verbose_name=_('Requires return'))
    max_loan_duration_days = models.PositiveIntegerField(
        default=30,
        verbose_name=_('Max loan duration (days)'),
    )

    # Financial baseline
    standard_cost = models.DecimalField(
        max_digits=15, decimal_places=4, null=True, blank=True,
        verbose_name=_('Standard cost'),
    )
    last_cost = models.DecimalField(
        max_digits=15, decimal_places=4, null=True, blank=True,
        verbose_name=_('Last cost'),
    )
    average_cost = models.DecimalField(
        max_digits=15, decimal_places=4, null=True, blank=True,
        verbose_name=_('Average cost'),
    )

    status = models.CharField(
        max_length=20,
        choices=ItemStatus.choices,
        default=ItemStatus.ACTIVE,
        verbose_name=_('Status'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('Item')
        verbose_name_plural = _('Items')
        ordering = ['code']
        indexes = [
            models.Index(fields=['item_type'], name='item_type_idx'),
        ]

    @property
    def is_active(self) -> bool:
        return self.status == ItemStatus.ACTIVE

    def __str__(self) -> str:
        return self.code

"""
Warehouse model — Where stock is kept.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class WarehouseQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)


class Warehouse(models.Model):
    """
    Storage location, keyed by code.

    Warehouses belong to the external registry: the ledger only reads them
    as location keys. They are deactivated, never deleted, while stock
    records point at them.

    Examples:
        Warehouse.objects.create(code='WH001', name='Jakarta Main Warehouse')
        Warehouse.objects.create(code='WH002', name='Surabaya Branch')
    """

    code = models.CharField(
        unique=True,
        max_length=50,
        verbose_name=_('Code'),
        help_text=_('Unique identifier (e.g. WH001)'),
    )
    name = models.CharField(
        max_length=255,
        verbose_name=_('Name'),
    )
    warehouse_type = models.CharField(
        max_length=50,
        default='STANDARD',
        verbose_name=_('Type'),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Active'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = WarehouseQuerySet.as_manager()

    class Meta:
        verbose_name = _('Warehouse')
        verbose_name_plural = _('Warehouses')
        ordering = ['code']

    def __str__(self) -> str:
        return self.code

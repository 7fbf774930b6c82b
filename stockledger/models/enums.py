"""
Enums for Stock Ledger models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ItemType(models.TextChoices):
    """
    Kind of catalog item.

    STOCK: Consumed or sold by quantity (rebar, helmets).
    ASSET: Tracked equipment, usually loanable (laptops, mixers).
    """
    STOCK = 'STOCK', _('Stock')
    ASSET = 'ASSET', _('Asset')


class ItemStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', _('Active')
    INACTIVE = 'INACTIVE', _('Inactive')


class MovementType(models.TextChoices):
    """Stock-affecting event kinds."""
    RECEIPT = 'RECEIPT', _('Receipt')          # on_hand +
    ISSUE = 'ISSUE', _('Issue')                # on_hand - (and reserved - on commit)
    RESERVE = 'RESERVE', _('Reserve')          # reserved +
    RELEASE = 'RELEASE', _('Release')          # reserved -
    ADJUSTMENT = 'ADJUSTMENT', _('Adjustment')  # on_hand +/- (count correction)

"""
Pytest fixtures for Stock Ledger tests.
"""

from decimal import Decimal

import pytest

from stockledger import ledger
from stockledger.models import Item, ItemType, Warehouse


@pytest.fixture
def wh001(db):
    """Main warehouse."""
    return Warehouse.objects.create(code='WH001', name='Jakarta Main Warehouse')


@pytest.fixture
def wh002(db):
    """Branch warehouse."""
    return Warehouse.objects.create(code='WH002', name='Surabaya Branch')


@pytest.fixture
def laptop(db):
    """Loanable asset (ITM001)."""
    return Item.objects.create(
        code='ITM001',
        name='Laptop Dell Inspiron 15',
        item_type=ItemType.ASSET,
        is_loanable=True,
        requires_return=True,
    )


@pytest.fixture
def rebar(db, laptop):
    """Stock item (ITM002)."""
    return Item.objects.create(
        code='ITM002',
        name='Steel Rebar 12mm',
        item_type=ItemType.STOCK,
        standard_cost=Decimal('25000'),
    )


@pytest.fixture
def helmet(db):
    """Stock item (ITM003)."""
    return Item.objects.create(code='ITM003', name='Safety Helmet')


@pytest.fixture
def stocked_rebar(rebar, wh001):
    """
    ITM002 @ WH001: on_hand=1000, reserved=100 (available=900),
    average cost 25,000, reorder point 200.
    """
    ledger.set_levels(rebar, wh001, reorder_point=Decimal('200'))
    ledger.receive(rebar, wh001, Decimal('1000'), unit_cost=Decimal('25000'), reason='Opening balance')
    return ledger.reserve(rebar, wh001, Decimal('100'))

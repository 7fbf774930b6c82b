"""
Identity lookup — resolve item/warehouse references.

Ledger operations accept a model instance, a primary key (int) or a code
(str). Mutations only resolve active identities; read paths may opt out.
"""

from stockledger.exceptions import NotFound
from stockledger.models.item import Item
from stockledger.models.warehouse import Warehouse


def _resolve(model, queryset, value, label: str):
    if isinstance(value, model):
        if queryset.filter(pk=value.pk).exists():
            return value
        raise NotFound(**{label: str(value), 'reason': 'inactive'})

    lookup = {'pk': value} if isinstance(value, int) else {'code': value}
    try:
        return queryset.get(**lookup)
    except model.DoesNotExist:
        raise NotFound(**{label: str(value)}) from None


def resolve_item(value, active_only: bool = True) -> Item:
    """
    Return the Item referenced by ``value``.

    Raises:
        NotFound: unknown code/pk, or an inactive item when active_only
    """
    qs = Item.objects.active() if active_only else Item.objects.all()
    return _resolve(Item, qs, value, 'item')


def resolve_warehouse(value, active_only: bool = True) -> Warehouse:
    """
    Return the Warehouse referenced by ``value``.

    Raises:
        NotFound: unknown code/pk, or an inactive warehouse when active_only
    """
    qs = Warehouse.objects.active() if active_only else Warehouse.objects.all()
    return _resolve(Warehouse, qs, value, 'warehouse')


def key_codes(item, warehouse) -> tuple[str, str]:
    """
    (item code, warehouse code) for an error payload.

    Only used on failure paths, before the record is locked. Inactive
    identities still resolve; unknown ones raise NotFound.
    """
    return (
        resolve_item(item, active_only=False).code,
        resolve_warehouse(warehouse, active_only=False).code,
    )

"""
Stock Ledger Admin.

Provides views for production debugging:
- Item / Warehouse: list + edit (catalog data)
- StockRecord: read-only (on hand, reserved, available, value)
- Movement: read-only audit trail

Balances only change via the ledger service, never through the admin.
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from stockledger.models import Item, Movement, StockRecord, Warehouse


class ReadOnlyAdminMixin:

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# CATALOG
# =========================================================================

@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'item_type', 'unit', 'is_loanable', 'status']
    list_filter = ['item_type', 'status', 'is_loanable']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'warehouse_type', 'is_active']
    list_filter = ['is_active', 'warehouse_type']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# STOCK RECORD ADMIN (read-only)
# =========================================================================

@admin.register(StockRecord)
class StockRecordAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockRecord admin — read-only. Stock only changes via the ledger."""

    list_display = ['item', 'warehouse', 'quantity_on_hand', 'quantity_reserved',
                    'available_display', 'reorder_point', 'total_value_display', 'is_active']
    list_filter = ['warehouse', 'is_active']
    search_fields = ['item__code', 'item__name']
    list_select_related = ['item', 'warehouse']
    ordering = ['warehouse', 'item']

    @admin.display(description=_('Available'))
    def available_display(self, obj):
        return obj.quantity_available

    @admin.display(description=_('Total value'))
    def total_value_display(self, obj):
        return obj.total_value


# =========================================================================
# MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(Movement)
class MovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Movement admin — read-only. Immutable audit trail."""

    list_display = ['timestamp', 'record', 'sequence', 'movement_type',
                    'on_hand_delta', 'reserved_delta', 'actor', 'reference']
    list_filter = ['movement_type', 'timestamp']
    search_fields = ['reason', 'reference', 'actor']
    list_select_related = ['record__item', 'record__warehouse']
    date_hierarchy = 'timestamp'

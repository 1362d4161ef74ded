from django.contrib import admin
from guardian.admin import GuardedModelAdmin
from simple_history.admin import SimpleHistoryAdmin

from core.admin_utils import CreatorPermsAdminMixin, ReadOnlyAdminMixin
from inventory.models import StockBalance, StockMovement, Warehouse


@admin.register(Warehouse)
class WarehouseAdmin(CreatorPermsAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("name", "contact_person", "contact_number", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "address")


@admin.register(StockBalance)
class StockBalanceAdmin(ReadOnlyAdminMixin, GuardedModelAdmin, SimpleHistoryAdmin):
    """Quantities change only through transfers and adjustments."""
    list_display = ("product", "warehouse", "quantity", "average_cost", "updated_at")
    list_filter = ("warehouse",)
    search_fields = ("product__code", "product__name")


@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("reference_number", "type", "transaction_date", "warehouse", "product", "quantity", "created_by")
    list_filter = ("type", "warehouse")
    search_fields = ("reference_number", "remarks", "product__code")
    date_hierarchy = "transaction_date"

from django.contrib import admin
from guardian.admin import GuardedModelAdmin

from core.admin_utils import CreatorPermsAdminMixin
from masterdata.models import Product, ProductCategory


@admin.register(ProductCategory)
class ProductCategoryAdmin(CreatorPermsAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("name", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(Product)
class ProductAdmin(CreatorPermsAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("code", "name", "category", "unit", "purchase_price", "selling_price", "is_active")
    list_filter = ("category", "is_active")
    search_fields = ("code", "name")

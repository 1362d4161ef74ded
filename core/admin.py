from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _
from guardian.admin import GuardedModelAdmin
from simple_history.admin import SimpleHistoryAdmin

from core.admin_utils import CreatorPermsAdminMixin, ReadOnlyAdminMixin
from core.models import AuditLog, CompanySetting, NumberSeries, TaxSetting, UserProfile

User = get_user_model()


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    fields = ("role", "phone")


admin.site.unregister(User)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    inlines = [UserProfileInline]
    list_display = ("email", "first_name", "role", "is_active", "is_superuser")

    @admin.display(description=_("Role"))
    def role(self, obj):
        profile = getattr(obj, "profile", None)
        return profile.get_role_display() if profile else "-"


@admin.register(NumberSeries)
class NumberSeriesAdmin(GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("code", "prefix", "next_number", "min_width")
    search_fields = ("code",)
    ordering = ("code",)


@admin.register(CompanySetting)
class CompanySettingAdmin(SimpleHistoryAdmin):
    fieldsets = (
        (_("General"), {"fields": ("name", "legal_name", "tax_identification_number", "registration_number")}),
        (_("Address"), {"fields": ("address", "city", "state", "postal_code", "country", "phone", "email", "website")}),
        (_("Formats"), {"fields": (
            "currency", "currency_symbol", "date_format", "time_format", "timezone",
            "fiscal_year_start_month", "decimal_separator", "thousand_separator",
        )}),
        (_("Document prefixes"), {"fields": (
            "invoice_prefix", "purchase_prefix", "sales_prefix",
            "receipt_prefix", "payment_prefix", "journal_prefix",
        )}),
    )

    def has_add_permission(self, request):
        return not CompanySetting.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(TaxSetting)
class TaxSettingAdmin(CreatorPermsAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("name", "rate", "account", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("created_at", "user", "action", "module", "object_type", "reference_id", "ip_address")
    list_filter = ("module", "action")
    search_fields = ("description", "reference_id", "user__email")
    date_hierarchy = "created_at"

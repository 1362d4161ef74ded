from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django_object_actions import DjangoObjectActions, action
from guardian.admin import GuardedModelAdmin
from simple_history.admin import SimpleHistoryAdmin

from core.admin_utils import CreatorPermsAdminMixin
from ledger.forms import FinancialYearForm
from ledger.models import AccountCategory, ChartOfAccount, FinancialYear, JournalEntry, JournalItem
from ledger.services import financial_years, journals


@admin.register(AccountCategory)
class AccountCategoryAdmin(CreatorPermsAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("name", "type", "created_at")
    list_filter = ("type",)
    search_fields = ("name",)


@admin.register(ChartOfAccount)
class ChartOfAccountAdmin(CreatorPermsAdminMixin, GuardedModelAdmin, SimpleHistoryAdmin):
    list_display = ("account_code", "name", "category", "is_active")
    list_filter = ("category__type", "is_active")
    search_fields = ("account_code", "name")
    readonly_fields = ("balance",)

    @admin.display(description="Balance")
    def balance(self, obj):
        return obj.get_balance() if obj.pk else None


class FinancialYearAdminForm(FinancialYearForm):
    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start_date"), cleaned.get("end_date")
        if start and end:
            clash = financial_years.find_overlapping(start, end, exclude_pk=self.instance.pk).first()
            if clash is not None:
                raise ValidationError(f"The date range overlaps with financial year {clash.name}.", code="date_range")
        return cleaned


@admin.register(FinancialYear)
class FinancialYearAdmin(DjangoObjectActions, GuardedModelAdmin, SimpleHistoryAdmin):
    form = FinancialYearAdminForm
    list_display = ("name", "start_date", "end_date", "is_active")
    list_filter = ("is_active",)
    ordering = ("-start_date",)
    readonly_fields = ("is_active",)

    change_actions = ("activate_action",)

    def save_model(self, request, obj, form, change):
        # re-checks the overlap under a row lock and writes the audit record
        financial_years.save_financial_year(form, user=request.user, request=request)

    def get_change_actions(self, request, object_id, form_url):
        obj = self.get_object(request, object_id)
        if not obj or obj.is_active:
            return ()
        return ("activate_action",)

    @action(label="Activate", description="Make this the only active financial year")
    def activate_action(self, request, obj):
        financial_years.activate(obj, user=request.user, request=request)
        self.message_user(request, f"{obj.name} is now active.", level=messages.SUCCESS)


class JournalItemInline(admin.TabularInline):
    model = JournalItem
    extra = 0


@admin.register(JournalEntry)
class JournalEntryAdmin(DjangoObjectActions, CreatorPermsAdminMixin, GuardedModelAdmin, SimpleHistoryAdmin):
    inlines = [JournalItemInline]
    list_display = ("reference_number", "entry_date", "financial_year", "status", "created_by")
    list_filter = ("status", "financial_year")
    search_fields = ("reference_number", "narration")
    readonly_fields = ("status", "posted_at")

    change_actions = ("post_action", "cancel_action")

    def get_change_actions(self, request, object_id, form_url):
        obj = self.get_object(request, object_id)
        if not obj:
            return ()
        if obj.status == JournalEntry.Status.DRAFT:
            return ("post_action", "cancel_action")
        if obj.status == JournalEntry.Status.POSTED:
            return ("cancel_action",)
        return ()

    @action(label="Post", description="Post this journal entry")
    def post_action(self, request, obj):
        try:
            journals.post_entry(obj, user=request.user, request=request)
            self.message_user(request, "Journal entry posted.", level=messages.SUCCESS)
        except ValidationError as e:
            self.message_user(request, f"Could not post: {' '.join(e.messages)}", level=messages.ERROR)

    @action(label="Cancel", description="Cancel this journal entry")
    def cancel_action(self, request, obj):
        try:
            journals.cancel_entry(obj, user=request.user, request=request)
            self.message_user(request, "Journal entry cancelled.", level=messages.SUCCESS)
        except ValidationError as e:
            self.message_user(request, f"Could not cancel: {' '.join(e.messages)}", level=messages.ERROR)

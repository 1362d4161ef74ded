import logging

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_http_methods

from core.exceptions import ProtectedRecordError
from core.models import AuditLog
from core.permissions import ACCOUNTING_ROLES, role_required
from core.services.records import guarded_delete, save_with_audit, toggle_active
from core.views.common import clean_date_param, clean_param, filter_status, flash_unexpected, validation_text
from ledger.forms import (
    AccountCategoryForm,
    ChartOfAccountForm,
    FinancialYearForm,
    JournalEntryForm,
    JournalItemFormSet,
)
from ledger.models import AccountCategory, ChartOfAccount, FinancialYear, JournalEntry
from ledger.services import financial_years, journals
from ledger.services.balances import account_balance, account_totals, trial_balance

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ["name", "type", "description"]
ACCOUNT_FIELDS = ["account_code", "name", "category", "description", "is_active"]


# ---------------------------------------------------------------------------
# Account categories
# ---------------------------------------------------------------------------

@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET", "POST"])
def category_list(request):
    if request.method == "POST":
        form = AccountCategoryForm(request.POST)
        if form.is_valid():
            form.instance.created_by = request.user
            category = save_with_audit(form, user=request.user, fields=CATEGORY_FIELDS, request=request)
            messages.success(request, _("Account category created: %(name)s") % {"name": category.name})
            return redirect("ledger:category-list")
    else:
        form = AccountCategoryForm()

    categories = AccountCategory.objects.prefetch_related("accounts").order_by("type", "name")
    return render(request, "ledger/category_list.html", {
        "categories": categories,
        "types": AccountCategory.Type.choices,
        "form": form,
    })


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET", "POST"])
def category_edit(request, pk: int):
    category = get_object_or_404(AccountCategory, pk=pk)

    if request.method == "POST":
        form = AccountCategoryForm(request.POST, instance=category)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=CATEGORY_FIELDS, request=request)
            messages.success(request, _("Account category updated."))
            return redirect("ledger:category-list")
    else:
        form = AccountCategoryForm(instance=category)

    return render(request, "ledger/category_form.html", {"form": form, "category": category})


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["POST"])
def category_delete(request, pk: int):
    category = get_object_or_404(AccountCategory, pk=pk)
    try:
        guarded_delete(
            category,
            user=request.user,
            fields=CATEGORY_FIELDS,
            action=AuditLog.Action.DELETED,
            checks=[(category.accounts.all(), _("Cannot delete category with associated accounts."))],
            request=request,
        )
    except ProtectedRecordError as e:
        messages.error(request, str(e))
        return redirect("ledger:category-list")

    messages.success(request, _("Account category deleted."))
    return redirect("ledger:category-list")


# ---------------------------------------------------------------------------
# Chart of accounts
# ---------------------------------------------------------------------------

@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET"])
def account_list(request):
    search = clean_param(request, "search")
    category_type = clean_param(request, "category_type")
    status = clean_param(request, "status")

    qs = ChartOfAccount.objects.select_related("category").order_by("account_code")
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(account_code__icontains=search) | Q(description__icontains=search))
    if category_type:
        qs = qs.filter(category__type=category_type)
    qs = filter_status(qs, status)

    return render(request, "ledger/account_list.html", {
        "rows": trial_balance(qs),
        "filters": {"search": search, "category_type": category_type, "status": status},
        "types": AccountCategory.Type.choices,
    })


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET", "POST"])
def account_create(request):
    if request.method == "POST":
        form = ChartOfAccountForm(request.POST)
        if form.is_valid():
            form.instance.created_by = request.user
            account = save_with_audit(form, user=request.user, fields=ACCOUNT_FIELDS, request=request)
            messages.success(request, _("Account created: %(code)s") % {"code": account.account_code})
            return redirect("ledger:account-list")
    else:
        form = ChartOfAccountForm(initial={"is_active": True})

    return render(request, "ledger/account_form.html", {"form": form, "account": None, "mode": "create"})


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET"])
def account_detail(request, pk: int):
    account = get_object_or_404(ChartOfAccount.objects.select_related("category", "created_by"), pk=pk)
    debit, credit = account_totals(account)
    items = (
        account.journal_items
        .select_related("journal_entry")
        .order_by("-journal_entry__entry_date", "-id")[:10]
    )
    return render(request, "ledger/account_detail.html", {
        "account": account,
        "balance": account_balance(account),
        "total_debit": debit,
        "total_credit": credit,
        "items": items,
    })


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET", "POST"])
def account_edit(request, pk: int):
    account = get_object_or_404(ChartOfAccount, pk=pk)

    if request.method == "POST":
        form = ChartOfAccountForm(request.POST, instance=account)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=ACCOUNT_FIELDS, request=request)
            messages.success(request, _("Account updated."))
            return redirect("ledger:account-detail", pk=account.pk)
    else:
        form = ChartOfAccountForm(instance=account)

    return render(request, "ledger/account_form.html", {"form": form, "account": account, "mode": "edit"})


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["POST"])
def account_delete(request, pk: int):
    account = get_object_or_404(ChartOfAccount, pk=pk)
    try:
        guarded_delete(
            account,
            user=request.user,
            fields=ACCOUNT_FIELDS,
            action=AuditLog.Action.DELETED,
            checks=[
                (account.journal_items.all(), _("Cannot delete account with journal entries.")),
                (account.tax_settings.all(), _("Cannot delete account used by a tax setting.")),
            ],
            request=request,
        )
    except ProtectedRecordError as e:
        messages.error(request, str(e))
        return redirect("ledger:account-detail", pk=pk)

    messages.success(request, _("Account deleted."))
    return redirect("ledger:account-list")


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["POST"])
def account_toggle_status(request, pk: int):
    account = get_object_or_404(ChartOfAccount, pk=pk)
    active = toggle_active(account, user=request.user, request=request)
    messages.success(request, _("Account activated.") if active else _("Account deactivated."))
    return redirect("ledger:account-list")


# ---------------------------------------------------------------------------
# Financial years
# ---------------------------------------------------------------------------

@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET"])
def financial_year_list(request):
    years = FinancialYear.objects.annotate(entry_count=Count("journal_entries")).order_by("-start_date")
    return render(request, "ledger/financial_year_list.html", {"years": years})


def _financial_year_form(request, year, template_mode):
    if request.method == "POST":
        form = FinancialYearForm(request.POST, instance=year)
        if form.is_valid():
            try:
                saved = financial_years.save_financial_year(form, user=request.user, request=request)
            except ValidationError as e:
                form.add_error(None, e)
            else:
                messages.success(request, _("Financial year saved: %(name)s") % {"name": saved.name})
                return redirect("ledger:financial-year-list")
    else:
        form = FinancialYearForm(instance=year)

    return render(request, "ledger/financial_year_form.html", {"form": form, "year": year, "mode": template_mode})


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET", "POST"])
def financial_year_create(request):
    return _financial_year_form(request, None, "create")


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET", "POST"])
def financial_year_edit(request, pk: int):
    year = get_object_or_404(FinancialYear, pk=pk)
    return _financial_year_form(request, year, "edit")


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["POST"])
def financial_year_activate(request, pk: int):
    year = get_object_or_404(FinancialYear, pk=pk)
    try:
        financial_years.activate(year, user=request.user, request=request)
    except Exception as e:
        flash_unexpected(request, e)
        return redirect("ledger:financial-year-list")

    messages.success(request, _("Financial year %(name)s is now active.") % {"name": year.name})
    return redirect("ledger:financial-year-list")


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["POST"])
def financial_year_delete(request, pk: int):
    year = get_object_or_404(FinancialYear, pk=pk)
    try:
        financial_years.delete_financial_year(year, user=request.user, request=request)
    except ProtectedRecordError as e:
        messages.error(request, str(e))
        return redirect("ledger:financial-year-list")

    messages.success(request, _("Financial year deleted."))
    return redirect("ledger:financial-year-list")


# ---------------------------------------------------------------------------
# Journal entries
# ---------------------------------------------------------------------------

@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET"])
def journal_list(request):
    search = clean_param(request, "search")
    status = clean_param(request, "status")
    start_date = clean_date_param(request, "start_date")
    end_date = clean_date_param(request, "end_date")

    qs = JournalEntry.objects.select_related("financial_year", "created_by").order_by("-entry_date", "-id")
    if search:
        qs = qs.filter(Q(reference_number__icontains=search) | Q(narration__icontains=search))
    if status in JournalEntry.Status.values:
        qs = qs.filter(status=status)
    if start_date:
        qs = qs.filter(entry_date__gte=start_date)
    if end_date:
        qs = qs.filter(entry_date__lte=end_date)

    return render(request, "ledger/journal_list.html", {
        "journals": qs,
        "filters": {
            "search": search,
            "status": status,
            "start_date": start_date.isoformat() if start_date else "",
            "end_date": end_date.isoformat() if end_date else "",
        },
        "statuses": JournalEntry.Status.choices,
    })


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET", "POST"])
def journal_create(request):
    if FinancialYear.get_active() is None:
        messages.error(request, _("Please create and activate a financial year first."))
        return redirect("ledger:financial-year-list")

    if request.method == "POST":
        form = JournalEntryForm(request.POST)
        formset = JournalItemFormSet(request.POST)

        if form.is_valid() and formset.is_valid():
            try:
                journal = journals.save_journal_entry(form, formset, user=request.user, request=request)
            except ValidationError as e:
                form.add_error(None, e)
            except Exception as e:
                flash_unexpected(request, e)
            else:
                messages.success(request, _("Journal entry created: %(ref)s") % {"ref": journal.reference_number})
                return redirect("ledger:journal-detail", pk=journal.pk)
        else:
            messages.error(request, _("Could not save. Please fix the errors shown in the form."))
    else:
        form = JournalEntryForm(initial={"reference_number": ""})
        formset = JournalItemFormSet()

    return render(request, "ledger/journal_form.html", {"form": form, "formset": formset, "journal": None, "mode": "create"})


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET", "POST"])
def journal_edit(request, pk: int):
    journal = get_object_or_404(JournalEntry, pk=pk)

    if journal.status != JournalEntry.Status.DRAFT:
        messages.error(request, _("Only draft journal entries can be edited."))
        return redirect("ledger:journal-detail", pk=journal.pk)

    if request.method == "POST":
        form = JournalEntryForm(request.POST, instance=journal)
        formset = JournalItemFormSet(request.POST, instance=journal)

        if form.is_valid() and formset.is_valid():
            try:
                journals.save_journal_entry(form, formset, user=request.user, request=request)
            except ValidationError as e:
                form.add_error(None, e)
            except Exception as e:
                flash_unexpected(request, e)
            else:
                messages.success(request, _("Journal entry updated."))
                return redirect("ledger:journal-detail", pk=journal.pk)
        else:
            messages.error(request, _("Could not save. Please fix the errors shown in the form."))
    else:
        form = JournalEntryForm(instance=journal)
        formset = JournalItemFormSet(instance=journal)

    return render(request, "ledger/journal_form.html", {"form": form, "formset": formset, "journal": journal, "mode": "edit"})


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["GET"])
def journal_detail(request, pk: int):
    journal = get_object_or_404(JournalEntry.objects.select_related("financial_year", "created_by"), pk=pk)
    debit, credit = journal.totals()
    return render(request, "ledger/journal_detail.html", {
        "journal": journal,
        "items": journal.items.select_related("account"),
        "total_debit": debit,
        "total_credit": credit,
        "is_balanced": debit == credit,
    })


def _journal_action(request, pk, service, success_message):
    journal = get_object_or_404(JournalEntry, pk=pk)
    try:
        service(journal, user=request.user, request=request)
    except ValidationError as e:
        messages.error(request, validation_text(e))
    else:
        messages.success(request, success_message)
    return redirect("ledger:journal-detail", pk=journal.pk)


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["POST"])
def journal_post(request, pk: int):
    return _journal_action(request, pk, journals.post_entry, _("Journal entry posted."))


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["POST"])
def journal_cancel(request, pk: int):
    return _journal_action(request, pk, journals.cancel_entry, _("Journal entry cancelled."))


@role_required(*ACCOUNTING_ROLES)
@require_http_methods(["POST"])
def journal_delete(request, pk: int):
    journal = get_object_or_404(JournalEntry, pk=pk)
    try:
        journals.delete_entry(journal, user=request.user, request=request)
    except ValidationError as e:
        messages.error(request, validation_text(e))
        return redirect("ledger:journal-detail", pk=journal.pk)

    messages.success(request, _("Journal entry deleted."))
    return redirect("ledger:journal-list")

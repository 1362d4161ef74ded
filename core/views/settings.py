import logging

from django.contrib import messages
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_http_methods

from core.forms.settings_forms import CompanySettingForm, TaxSettingForm
from core.models import AuditLog, CompanySetting, TaxSetting
from core.permissions import SETTINGS_ROLES, role_required
from core.services.records import guarded_delete, save_with_audit, toggle_active
from core.views.common import clean_param, filter_status

logger = logging.getLogger(__name__)

TAX_FIELDS = ["name", "rate", "account", "description", "is_active"]
COMPANY_FIELDS = [f for f in CompanySetting.DEFAULTS] + [
    "legal_name", "tax_identification_number", "registration_number",
    "city", "state", "postal_code", "email", "website",
]


@role_required(*SETTINGS_ROLES)
@require_http_methods(["GET", "POST"])
def company_settings(request):
    setting = CompanySetting.get_default()

    if request.method == "POST":
        form = CompanySettingForm(request.POST, instance=setting)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=COMPANY_FIELDS, request=request)
            messages.success(request, _("Company settings updated."))
            return redirect("core:company-settings")
    else:
        form = CompanySettingForm(instance=setting)

    return render(request, "core/company_settings.html", {"form": form, "setting": setting})


@role_required(*SETTINGS_ROLES)
@require_http_methods(["GET"])
def tax_list(request):
    search = clean_param(request, "search")
    status = clean_param(request, "status")

    qs = TaxSetting.objects.select_related("account").order_by("name")
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search))
    qs = filter_status(qs, status)

    return render(request, "core/tax_list.html", {
        "taxes": qs,
        "filters": {"search": search, "status": status},
    })


@role_required(*SETTINGS_ROLES)
@require_http_methods(["GET", "POST"])
def tax_create(request):
    if request.method == "POST":
        form = TaxSettingForm(request.POST)
        if form.is_valid():
            tax = save_with_audit(form, user=request.user, fields=TAX_FIELDS, request=request)
            messages.success(request, _("Tax setting created: %(name)s") % {"name": tax.name})
            return redirect("core:tax-list")
    else:
        form = TaxSettingForm(initial={"is_active": True})

    return render(request, "core/tax_form.html", {"form": form, "tax": None})


@role_required(*SETTINGS_ROLES)
@require_http_methods(["GET", "POST"])
def tax_edit(request, pk: int):
    tax = get_object_or_404(TaxSetting, pk=pk)

    if request.method == "POST":
        form = TaxSettingForm(request.POST, instance=tax)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=TAX_FIELDS, request=request)
            messages.success(request, _("Tax setting updated."))
            return redirect("core:tax-list")
    else:
        form = TaxSettingForm(instance=tax)

    return render(request, "core/tax_form.html", {"form": form, "tax": tax})


@role_required(*SETTINGS_ROLES)
@require_http_methods(["POST"])
def tax_delete(request, pk: int):
    tax = get_object_or_404(TaxSetting, pk=pk)
    guarded_delete(tax, user=request.user, fields=TAX_FIELDS, action=AuditLog.Action.DELETED, request=request)
    messages.success(request, _("Tax setting deleted."))
    return redirect("core:tax-list")


@role_required(*SETTINGS_ROLES)
@require_http_methods(["POST"])
def tax_toggle_status(request, pk: int):
    tax = get_object_or_404(TaxSetting, pk=pk)
    active = toggle_active(tax, user=request.user, request=request)
    messages.success(request, _("Tax setting activated.") if active else _("Tax setting deactivated."))
    return redirect("core:tax-list")

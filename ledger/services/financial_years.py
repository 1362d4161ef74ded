"""Financial year rules: no overlapping ranges, at most one active year."""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext as _

from core.exceptions import ProtectedRecordError
from core.models import AuditLog
from core.services.audit import log_activity
from core.services.records import guarded_delete, save_with_audit
from ledger.models import FinancialYear

logger = logging.getLogger(__name__)

AUDIT_FIELDS = ["name", "start_date", "end_date", "is_active"]


def ranges_overlap(a_start, a_end, b_start, b_end) -> bool:
    """Closed interval test. Touching end/start days count as overlap."""
    return a_start <= b_end and a_end >= b_start


def find_overlapping(start_date, end_date, exclude_pk=None):
    qs = FinancialYear.objects.filter(start_date__lte=end_date, end_date__gte=start_date)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs


def get_active():
    return FinancialYear.get_active()


def _deactivate_others(year):
    FinancialYear.objects.exclude(pk=year.pk).filter(is_active=True).update(is_active=False)


@transaction.atomic
def save_financial_year(form, *, user, request=None):
    """
    Persist a valid FinancialYearForm.

    Raises ValidationError(code="date_range") when the range overlaps a stored
    year. Nothing is written in that case.
    """
    # lock the table rows so two concurrent saves cannot both pass the check
    list(FinancialYear.objects.select_for_update().values_list("pk", flat=True))

    year = form.instance
    clash = find_overlapping(year.start_date, year.end_date, exclude_pk=year.pk).first()
    if clash is not None:
        raise ValidationError(
            _("The date range overlaps with financial year %(name)s.") % {"name": clash.name},
            code="date_range",
        )

    def _activate_hook(obj):
        if obj.is_active:
            _deactivate_others(obj)

    return save_with_audit(form, user=user, fields=AUDIT_FIELDS, request=request, commit_hook=_activate_hook)


@transaction.atomic
def activate(year, *, user=None, request=None):
    """Make `year` the only active financial year."""
    list(FinancialYear.objects.select_for_update().values_list("pk", flat=True))

    _deactivate_others(year)
    year.is_active = True
    year.save(update_fields=["is_active"])

    log_activity(
        user=user,
        action=AuditLog.Action.ACTIVATED,
        instance=year,
        properties={"name": year.name},
        request=request,
    )
    logger.info("financial year %s activated", year.pk)
    return year


def delete_financial_year(year, *, user, request=None):
    if year.is_active:
        raise ProtectedRecordError(_("Cannot delete the active financial year."))

    return guarded_delete(
        year,
        user=user,
        fields=AUDIT_FIELDS,
        action=AuditLog.Action.DELETED,
        checks=[
            (year.journal_entries.all(), _("Cannot delete financial year with journal entries.")),
        ],
        request=request,
    )

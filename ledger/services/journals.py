"""Journal entry lifecycle: create/update (draft only), post, cancel, delete."""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils.translation import gettext as _
from django_fsm import TransitionNotAllowed

from core.models import AuditLog, CompanySetting, NumberSeries
from core.services.audit import log_activity, snapshot
from ledger.models import FinancialYear, JournalEntry

logger = logging.getLogger(__name__)

AUDIT_FIELDS = ["reference_number", "entry_date", "narration"]


def next_reference() -> str:
    prefix = CompanySetting.get_default().journal_prefix
    return NumberSeries.next_for("JE", prefix=prefix, min_width=5)


def _require_draft(entry, message):
    if entry.status != JournalEntry.Status.DRAFT:
        raise ValidationError(message, code="not_draft")


@transaction.atomic
def save_journal_entry(form, formset, *, user, request=None):
    """
    Persist a valid JournalEntryForm plus its JournalItemFormSet.

    New entries are attached to the active financial year and start as draft.
    Raises ValidationError when there is no active year or the entry is no
    longer a draft.
    """
    entry = form.instance
    creating = entry._state.adding
    old = None

    if creating:
        year = FinancialYear.get_active()
        if year is None:
            raise ValidationError(_("Please create and activate a financial year first."), code="no_active_year")
        entry.financial_year = year
        entry.created_by = user
        if not entry.reference_number:
            entry.reference_number = next_reference()
    else:
        locked = JournalEntry.objects.select_for_update().get(pk=entry.pk)
        _require_draft(locked, _("Only draft journal entries can be edited."))
        old = snapshot(locked, AUDIT_FIELDS)
        if not entry.reference_number:
            entry.reference_number = locked.reference_number

    entry = form.save()
    formset.instance = entry
    formset.save()

    debit, credit = entry.totals()
    if debit != credit:
        # formset.clean checks this too; the saved rows are what counts
        raise ValidationError(_("Debit and credit amounts must be equal."), code="unbalanced")

    new = snapshot(entry, AUDIT_FIELDS)
    if creating:
        log_activity(user=user, action=AuditLog.Action.CREATED, instance=entry,
                     properties={**new, "amount": debit}, request=request)
    else:
        log_activity(user=user, action=AuditLog.Action.UPDATED, instance=entry,
                     old=old, new=new, properties={"amount": debit}, request=request)

    logger.info("journal %s %s", entry.reference_number, "created" if creating else "updated")
    return entry


@transaction.atomic
def post_entry(entry, *, user, request=None):
    """draft -> posted. Totals are recomputed under a row lock."""
    locked = JournalEntry.objects.select_for_update().get(pk=entry.pk)
    _require_draft(locked, _("Only draft journal entries can be posted."))
    if not locked.is_balanced():
        raise ValidationError(_("An unbalanced journal entry cannot be posted."), code="unbalanced")

    locked.post()
    locked.save()

    log_activity(
        user=user,
        action=AuditLog.Action.POSTED,
        instance=locked,
        properties={
            "reference_number": locked.reference_number,
            "entry_date": locked.entry_date,
            "amount": locked.total_debit,
        },
        request=request,
    )
    logger.info("journal %s posted", locked.reference_number)
    return locked


@transaction.atomic
def cancel_entry(entry, *, user, request=None):
    locked = JournalEntry.objects.select_for_update().get(pk=entry.pk)
    previous = locked.status
    try:
        locked.cancel()
    except TransitionNotAllowed:
        raise ValidationError(_("This journal entry has already been cancelled."), code="cancelled")
    locked.save()

    log_activity(
        user=user,
        action=AuditLog.Action.CANCELLED,
        instance=locked,
        properties={
            "reference_number": locked.reference_number,
            "entry_date": locked.entry_date,
            "previous_status": previous,
        },
        request=request,
    )
    logger.info("journal %s cancelled (was %s)", locked.reference_number, previous)
    return locked


@transaction.atomic
def delete_entry(entry, *, user, request=None):
    locked = JournalEntry.objects.select_for_update().get(pk=entry.pk)
    _require_draft(locked, _("Only draft journal entries can be deleted."))

    details = {"id": locked.pk, **snapshot(locked, AUDIT_FIELDS), "amount": locked.total_debit}
    locked.delete()

    log_activity(user=user, action=AuditLog.Action.DELETED, model=JournalEntry, properties=details, request=request)
    logger.info("journal %s deleted", details["reference_number"])
    return details

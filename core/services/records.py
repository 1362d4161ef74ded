"""Audited create/update/delete helpers shared by the CRUD views.

Each helper runs the mutation and its audit record in one transaction.
"""

import logging

from django.db import transaction

from core.exceptions import ProtectedRecordError
from core.models import AuditLog
from core.services.audit import log_activity, snapshot

logger = logging.getLogger(__name__)


def ensure_no_dependents(*checks):
    """Referential guard.

    checks are (queryset, message) pairs; the first non-empty queryset
    raises ProtectedRecordError(message) and nothing is touched.
    """
    for queryset, message in checks:
        if queryset.exists():
            raise ProtectedRecordError(message)


@transaction.atomic
def save_with_audit(form, *, user, fields, request=None, commit_hook=None):
    """Save a valid ModelForm and log "created" or "updated".

    For updates the old values are read back from the database, because
    form validation has already copied the new values onto form.instance.
    commit_hook(obj) runs after the save, inside the transaction.
    """
    instance = form.instance
    creating = instance._state.adding
    old = None
    if not creating:
        old = snapshot(type(instance).objects.get(pk=instance.pk), fields)

    obj = form.save()
    if commit_hook is not None:
        commit_hook(obj)

    new = snapshot(obj, fields)
    if creating:
        log_activity(user=user, action=AuditLog.Action.CREATED, instance=obj, properties=new, request=request)
    else:
        log_activity(user=user, action=AuditLog.Action.UPDATED, instance=obj, old=old, new=new, request=request)
    logger.info("%s %s %s", "created" if creating else "updated", obj._meta.label, obj.pk)
    return obj


@transaction.atomic
def guarded_delete(instance, *, user, fields, action, checks=(), request=None):
    """Delete after the guards pass; the audit row keeps a snapshot."""
    ensure_no_dependents(*checks)

    details = {"id": instance.pk, **snapshot(instance, fields)}
    model = type(instance)
    instance.delete()

    log_activity(user=user, action=action, model=model, properties=details, request=request)
    logger.info("deleted %s %s", model._meta.label, details["id"])
    return details


@transaction.atomic
def toggle_active(instance, *, user, request=None):
    old_status = instance.is_active
    instance.is_active = not old_status
    instance.save()

    log_activity(
        user=user,
        action=AuditLog.Action.TOGGLED_STATUS,
        instance=instance,
        properties={"old_status": old_status, "new_status": instance.is_active},
        request=request,
    )
    return instance.is_active

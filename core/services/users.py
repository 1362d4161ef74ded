"""User administration with self-action and referential guards."""

import logging

from django.db import transaction
from django.utils.translation import gettext as _

from core.exceptions import SelfActionError
from core.models import AuditLog, UserProfile
from core.services.audit import log_activity
from core.services.records import ensure_no_dependents

logger = logging.getLogger(__name__)


def user_snapshot(user) -> dict:
    profile = getattr(user, "profile", None)
    return {
        "name": user.first_name,
        "email": user.email,
        "role": profile.role if profile else None,
        "phone": profile.phone if profile else "",
        "is_active": user.is_active,
    }


@transaction.atomic
def save_user(form, *, actor, request=None):
    """Save a valid UserForm together with the user's profile."""
    target = form.instance
    creating = target._state.adding
    old = None
    if not creating:
        old = user_snapshot(type(target).objects.select_related("profile").get(pk=target.pk))

    user = form.save()
    profile, _created = UserProfile.objects.get_or_create(user=user)
    profile.role = form.cleaned_data["role"]
    profile.phone = form.cleaned_data.get("phone") or ""
    profile.save()

    new = user_snapshot(user)
    if creating:
        log_activity(user=actor, action=AuditLog.Action.CREATED, instance=user, properties=new, request=request)
    else:
        log_activity(user=actor, action=AuditLog.Action.UPDATED, instance=user, old=old, new=new, request=request)
    logger.info("user %s %s", user.pk, "created" if creating else "updated")
    return user


@transaction.atomic
def delete_user(target, *, actor, request=None):
    if target.pk == actor.pk:
        raise SelfActionError(_("You cannot delete your own account."))

    ensure_no_dependents(
        (type(target).objects.filter(pk=target.pk, employee__isnull=False),
         _("Cannot delete user linked to an employee record.")),
        (target.journal_entries.all(), _("Cannot delete user who has created journal entries.")),
        (target.stock_movements.all(), _("Cannot delete user who has recorded stock movements.")),
    )

    details = {"id": target.pk, **user_snapshot(target)}
    model = type(target)
    target.delete()

    log_activity(user=actor, action=AuditLog.Action.DELETED, model=model, properties=details, request=request)
    logger.info("user %s deleted", details["id"])
    return details


@transaction.atomic
def toggle_user_status(target, *, actor, request=None):
    if target.pk == actor.pk:
        raise SelfActionError(_("You cannot deactivate your own account."))

    old_status = target.is_active
    target.is_active = not old_status
    target.save(update_fields=["is_active"])

    log_activity(
        user=actor,
        action=AuditLog.Action.TOGGLED_STATUS,
        instance=target,
        properties={"old_status": old_status, "new_status": target.is_active},
        request=request,
    )
    return target.is_active


@transaction.atomic
def reset_password(target, password, *, actor, request=None):
    target.set_password(password)
    target.save(update_fields=["password"])

    log_activity(user=actor, action=AuditLog.Action.RESET_PASSWORD, instance=target, request=request)
    logger.info("password reset for user %s", target.pk)

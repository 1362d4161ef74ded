"""Explicit audit writer.

Every mutating view calls log_activity() itself, inside the same
transaction.atomic block as the change. There is no signal that tries to
infer the acting user.
"""

import logging
from datetime import date, datetime
from decimal import Decimal

from django.db.models import Model

from core.models import AuditLog

logger = logging.getLogger(__name__)

MODULES = {
    "auth.user": "users",
    "core.userprofile": "users",
    "ledger.accountcategory": "accounts",
    "ledger.chartofaccount": "accounts",
    "ledger.financialyear": "financial_years",
    "ledger.journalentry": "journal_entries",
    "masterdata.productcategory": "products",
    "masterdata.product": "products",
    "inventory.warehouse": "warehouses",
    "inventory.stockmovement": "inventory",
    "inventory.stockbalance": "inventory",
    "hr.department": "departments",
    "hr.designation": "designations",
    "hr.employee": "employees",
    "core.taxsetting": "settings",
    "core.companysetting": "settings",
}


def _json_safe(value):
    if isinstance(value, Model):
        return value.pk
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def snapshot(instance, fields) -> dict:
    """Return {field: value} for the given fields, JSON-safe.

    Foreign keys are stored as ids ("category" -> category_id value).
    """
    data = {}
    for name in fields:
        field = instance._meta.get_field(name)
        if field.is_relation and field.many_to_one:
            data[name] = getattr(instance, field.attname)
        else:
            data[name] = _json_safe(getattr(instance, name))
    return data


def module_for(subject) -> str:
    """Module name for a model instance or a model class."""
    if subject is None:
        return "general"
    return MODULES.get(subject._meta.label_lower, "other")


def _client_meta(request):
    if request is None:
        return None, ""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    ip = forwarded.split(",")[0].strip() if forwarded else request.META.get("REMOTE_ADDR")
    return ip or None, (request.META.get("HTTP_USER_AGENT") or "")[:255]


def _clean(payload):
    if payload is None:
        return None
    return {k: _json_safe(v) for k, v in payload.items()}


def log_activity(*, user, action, instance=None, model=None, properties=None, old=None, new=None,
                 request=None, description=""):
    """Append one audit row.

    - user:       the actor (None for system jobs)
    - action:     verb, e.g. "created", "updated", "deleted account"
    - instance:   subject entity
    - model:      subject model class, for deletes where the row is gone
    - old/new:    property diff for updates
    - properties: flat detail payload (deletes, transfers, ...)
    """
    ip, agent = _client_meta(request)

    subject = instance if instance is not None else model
    if subject is None:
        object_type = ""
    elif isinstance(subject, type):
        object_type = subject.__name__
    else:
        object_type = type(subject).__name__

    if instance is not None and instance.pk is not None:
        reference_id = str(instance.pk)
    else:
        reference_id = str((properties or {}).get("id") or "")

    entry = AuditLog.objects.create(
        user=user if user is not None and user.is_authenticated else None,
        ip_address=ip,
        user_agent=agent,
        action=action,
        module=module_for(subject),
        object_type=object_type,
        reference_id=reference_id,
        old_values=_clean(old),
        new_values=_clean(new),
        properties=_clean(properties) or None,
        description=description,
    )
    logger.info("audit: user=%s %s %s(%s)", entry.user_id, action, object_type, reference_id)
    return entry

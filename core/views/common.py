"""Small helpers shared by the function views of every app."""

import logging

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date
from django.utils.translation import gettext as _

logger = logging.getLogger(__name__)


def flash_unexpected(request, exc):
    """Log the traceback and show "An error occurred: ..."."""
    logger.exception("unexpected error in %s", request.path)
    messages.error(request, _("An error occurred: %(error)s") % {"error": exc})


def validation_text(exc: ValidationError) -> str:
    return " ".join(exc.messages)


def filter_status(qs, status):
    """?status=active|inactive on models with an is_active flag."""
    if status == "active":
        return qs.filter(is_active=True)
    if status == "inactive":
        return qs.filter(is_active=False)
    return qs


def clean_param(request, name):
    return (request.GET.get(name) or "").strip()


def clean_date_param(request, name):
    """?name=YYYY-MM-DD as a date. Malformed or impossible dates come back as None."""
    try:
        return parse_date(clean_param(request, name))
    except ValueError:
        return None

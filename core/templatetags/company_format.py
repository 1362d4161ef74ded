"""Render dates and amounts the way the company settings ask for.

    {% load company_format %}
    {{ journal.entry_date|company_date:company }}
    {{ product.selling_price|company_money:company }}

`company` comes from the context processor; called without an argument
the filters read the stored settings row.
"""

from django import template

from core.models import CompanySetting

register = template.Library()


def _setting(company):
    return company if isinstance(company, CompanySetting) else CompanySetting.get_default()


@register.filter
def company_date(value, company=None):
    return _setting(company).format_date(value) or ""


@register.filter
def company_money(value, company=None):
    if value in (None, ""):
        return ""
    return _setting(company).format_currency(value)

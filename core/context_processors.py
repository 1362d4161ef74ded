from core.models import CompanySetting
from core.permissions import (
    ACCOUNTING_ROLES,
    HR_ROLES,
    INVENTORY_ROLES,
    SETTINGS_ROLES,
    has_role,
    user_role,
)


def base_context_processor(request):
    """Company settings and the navigation sections the current role may open."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return {}

    return {
        "company": CompanySetting.get_default(),
        "current_role": user_role(user),
        "nav": {
            "accounting": has_role(user, *ACCOUNTING_ROLES),
            "inventory": has_role(user, *INVENTORY_ROLES),
            "hr": has_role(user, *HR_ROLES),
            "settings": has_role(user, *SETTINGS_ROLES),
        },
    }

"""Role checks and guardian helpers.

Roles:
- Every back-office view declares the roles allowed to use it with
  @role_required(...). The check runs before the view body.
- Superusers count as admin, users without a profile count as plain users.

Guardian:
- When an object is created from the admin, the creating user gets
  object-level view/change/delete permissions on it.
"""

from functools import wraps

from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from guardian.shortcuts import assign_perm

from core.models import Role

DEFAULT_PERMS = ("view", "change", "delete")

ACCOUNTING_ROLES = (Role.ADMIN, Role.ACCOUNTANT)
INVENTORY_ROLES = (Role.ADMIN, Role.MANAGER)
HR_ROLES = (Role.ADMIN, Role.MANAGER)
SETTINGS_ROLES = (Role.ADMIN,)


def user_role(user):
    if not user or not user.is_authenticated:
        return None
    if user.is_superuser:
        return Role.ADMIN
    profile = getattr(user, "profile", None)
    if profile is None:
        return Role.USER
    return profile.role


def has_role(user, *roles) -> bool:
    return user_role(user) in roles


def role_required(*roles):
    """Login + role gate for function views."""
    def decorator(view_func):
        @login_required
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if not has_role(request.user, *roles):
                raise PermissionDenied
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def assign_object_perms_to_user(user, obj, perms=DEFAULT_PERMS):
    """Assign view/change/delete perms for obj to a user."""
    if not user or not user.is_authenticated:
        return
    app_label = obj._meta.app_label
    model_name = obj._meta.model_name
    for p in perms:
        assign_perm(f"{app_label}.{p}_{model_name}", user, obj)

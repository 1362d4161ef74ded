"""Admin mixins to keep admin code simple and consistent."""

from core.permissions import assign_object_perms_to_user


class CreatorPermsAdminMixin:
    """Mixin: after an add, stamp created_by and give the creator guardian perms.

    This avoids relying on signals (signals don't know the request.user).
    """

    def save_model(self, request, obj, form, change):
        if not change and hasattr(obj, "created_by_id") and obj.created_by_id is None:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)

        if not change:
            assign_object_perms_to_user(request.user, obj)


class ReadOnlyAdminMixin:
    """For append-only tables: list and inspect, nothing else."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils.translation import gettext_lazy as _


class AuditLog(models.Model):
    """Append-only record of who changed what.

    Written by core.services.audit.log_activity from every mutating view,
    inside the same transaction as the change it describes.
    """

    class Action(models.TextChoices):
        CREATED = "created", _("Created")
        UPDATED = "updated", _("Updated")
        DELETED = "deleted", _("Deleted")
        TOGGLED_STATUS = "toggled status", _("Toggled status")
        ACTIVATED = "activated", _("Activated")
        POSTED = "posted", _("Posted")
        CANCELLED = "cancelled", _("Cancelled")
        TRANSFERRED_STOCK = "transferred stock", _("Transferred stock")
        ADJUSTED_STOCK = "adjusted stock", _("Adjusted stock")
        RESET_PASSWORD = "reset password", _("Reset password")

    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="audit_logs")
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=255, blank=True, default="")

    # Free text on purpose: deletes use "deleted <thing>" verbs
    action = models.CharField(max_length=50)
    module = models.CharField(max_length=50, default="general")

    object_type = models.CharField(max_length=100, blank=True, default="")
    reference_id = models.CharField(max_length=64, blank=True, default="")

    old_values = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_values = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    properties = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    description = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["user", "created_at"], name="core_audit_user_created_idx"),
            models.Index(fields=["module", "reference_id"], name="core_audit_module_ref_idx"),
        ]

    def __str__(self):
        return f"[{self.created_at:%Y-%m-%d %H:%M}] {self.user} {self.action} {self.object_type}({self.reference_id})"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValueError("Audit log entries are append-only.")
        return super().save(*args, **kwargs)

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class AccountCategory(models.Model):
    """Top-level grouping of the chart of accounts."""

    class Type(models.TextChoices):
        ASSET = "Asset", _("Asset")
        LIABILITY = "Liability", _("Liability")
        EQUITY = "Equity", _("Equity")
        REVENUE = "Revenue", _("Revenue")
        EXPENSE = "Expense", _("Expense")

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=20, choices=Type.choices)
    description = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["type", "name"]
        verbose_name_plural = "account categories"

    def __str__(self):
        return f"{self.name} ({self.get_type_display()})"

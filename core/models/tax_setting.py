from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class TaxSetting(models.Model):
    """Tax rate posted to a liability account."""

    name = models.CharField(max_length=255)
    rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text=_("Percentage, 0-100"),
    )
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    account = models.ForeignKey(
        "ledger.ChartOfAccount",
        on_delete=models.PROTECT,
        related_name="tax_settings",
        help_text=_("Liability account the tax is posted to"),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.rate}%)"

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from ledger.models.journal import JournalEntry


class JournalItem(models.Model):
    """One debit or credit line of a journal entry."""

    class Type(models.TextChoices):
        DEBIT = "debit", "Debit"
        CREDIT = "credit", "Credit"

    journal_entry = models.ForeignKey(JournalEntry, on_delete=models.CASCADE, related_name="items")
    account = models.ForeignKey("ledger.ChartOfAccount", on_delete=models.PROTECT, related_name="journal_items")

    type = models.CharField(max_length=10, choices=Type.choices)
    amount = models.DecimalField(max_digits=15, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))])
    description = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.get_type_display()} {self.amount} {self.account}"

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition
from simple_history.models import HistoricalRecords


class JournalEntry(models.Model):
    """Double-entry posting.

    Status is controlled by django-fsm: draft -> posted, draft/posted -> cancelled.
    Only posted entries count towards account balances.
    """
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        POSTED = "posted", "Posted"
        CANCELLED = "cancelled", "Cancelled"

    reference_number = models.CharField(max_length=20, unique=True)
    financial_year = models.ForeignKey("ledger.FinancialYear", on_delete=models.PROTECT, related_name="journal_entries")
    entry_date = models.DateField()
    narration = models.TextField()

    status = FSMField(default=Status.DRAFT, choices=Status.choices, editable=False)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="journal_entries")
    posted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    history = HistoricalRecords()

    class Meta:
        ordering = ("-entry_date", "-id")
        verbose_name_plural = "journal entries"
        indexes = [models.Index(fields=["status", "entry_date"], name="ledger_je_status_date_idx")]

    def __str__(self):
        return f"{self.reference_number} ({self.status})"

    def totals(self):
        sums = self.items.aggregate(
            d=models.Sum("amount", filter=models.Q(type="debit")),
            c=models.Sum("amount", filter=models.Q(type="credit")),
        )
        d = (sums["d"] or Decimal("0.00")).quantize(Decimal("0.01"))
        c = (sums["c"] or Decimal("0.00")).quantize(Decimal("0.01"))
        return d, c

    @property
    def total_debit(self):
        return self.totals()[0]

    @property
    def total_credit(self):
        return self.totals()[1]

    def is_balanced(self) -> bool:
        d, c = self.totals()
        return d == c and d > 0

    def assert_balanced(self):
        d, c = self.totals()
        if d != c:
            raise ValueError(f"Journal not balanced. Debit={d} Credit={c}")
        if d == 0:
            raise ValueError("Journal has no amounts.")

    @transition(field=status, source=Status.DRAFT, target=Status.POSTED)
    def post(self):
        self.assert_balanced()
        self.posted_at = timezone.now()

    @transition(field=status, source=[Status.DRAFT, Status.POSTED], target=Status.CANCELLED)
    def cancel(self):
        pass

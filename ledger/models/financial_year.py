from datetime import date

from django.db import models
from simple_history.models import HistoricalRecords


class FinancialYear(models.Model):
    """Bounded accounting period. At most one row is active.

    Overlap checks and activation live in ledger.services.financial_years,
    because both must run inside a transaction.
    """

    name = models.CharField(max_length=255, unique=True)
    start_date = models.DateField()
    end_date = models.DateField()
    is_active = models.BooleanField(default=False)

    history = HistoricalRecords()

    class Meta:
        ordering = ["-start_date"]

    def __str__(self):
        return self.name

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @staticmethod
    def generate_name(start_date: date, end_date: date) -> str:
        return f"{start_date:%Y}-{end_date:%Y}"

    @classmethod
    def get_active(cls):
        return cls.objects.filter(is_active=True).first()

from django.conf import settings
from django.db import models
from simple_history.models import HistoricalRecords


class ChartOfAccountQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def by_type(self, category_type):
        return self.filter(category__type=category_type)


class ChartOfAccount(models.Model):
    """Ledger account. The balance is never stored, see ledger.services.balances."""

    account_code = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=255)
    category = models.ForeignKey("ledger.AccountCategory", on_delete=models.PROTECT, related_name="accounts")
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ChartOfAccountQuerySet.as_manager()
    history = HistoricalRecords()

    class Meta:
        ordering = ["account_code"]

    def __str__(self):
        return f"{self.account_code} – {self.name}"

    def get_balance(self):
        from ledger.services.balances import account_balance
        return account_balance(self)

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from django.db import models
from simple_history.models import HistoricalRecords

# PHP-style date format tokens stored on the row -> strftime
_DATE_TOKENS = {"d": "%d", "m": "%m", "Y": "%Y", "y": "%y", "H": "%H", "h": "%I", "i": "%M", "A": "%p"}


class CompanySetting(models.Model):
    """Company configuration as an explicit single-row table.

    Always stored with pk=1; read it through get_default().
    """

    SINGLETON_PK = 1

    DEFAULTS = {
        "name": "আমার প্রতিষ্ঠান",
        "address": "ঢাকা, বাংলাদেশ",
        "country": "Bangladesh",
        "phone": "+880 1XXXXXXXXX",
        "currency": "BDT",
        "currency_symbol": "৳",
        "date_format": "d/m/Y",
        "time_format": "h:i A",
        "timezone": "Asia/Dhaka",
        "fiscal_year_start_month": "January",
        "decimal_separator": ".",
        "thousand_separator": ",",
        "invoice_prefix": "INV-",
        "purchase_prefix": "PO-",
        "sales_prefix": "SO-",
        "receipt_prefix": "REC-",
        "payment_prefix": "PAY-",
        "journal_prefix": "JE-",
    }

    name = models.CharField(max_length=255)
    legal_name = models.CharField(max_length=255, blank=True, default="")
    tax_identification_number = models.CharField(max_length=50, blank=True, default="")
    registration_number = models.CharField(max_length=50, blank=True, default="")

    address = models.TextField()
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    postal_code = models.CharField(max_length=20, blank=True, default="")
    country = models.CharField(max_length=100)

    phone = models.CharField(max_length=20)
    email = models.EmailField(max_length=255, blank=True, default="")
    website = models.CharField(max_length=255, blank=True, default="")

    currency = models.CharField(max_length=10)
    currency_symbol = models.CharField(max_length=5)
    date_format = models.CharField(max_length=20)
    time_format = models.CharField(max_length=20)
    timezone = models.CharField(max_length=100)
    fiscal_year_start_month = models.CharField(max_length=20)
    decimal_separator = models.CharField(max_length=1)
    thousand_separator = models.CharField(max_length=1)

    invoice_prefix = models.CharField(max_length=10)
    purchase_prefix = models.CharField(max_length=10)
    sales_prefix = models.CharField(max_length=10)
    receipt_prefix = models.CharField(max_length=10)
    payment_prefix = models.CharField(max_length=10)
    journal_prefix = models.CharField(max_length=10)

    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        verbose_name = "company settings"
        verbose_name_plural = "company settings"

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    @classmethod
    def get_default(cls) -> "CompanySetting":
        setting, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK, defaults=cls.DEFAULTS)
        return setting

    def format_number(self, number, decimals: int = 2) -> str:
        q = Decimal(1).scaleb(-decimals) if decimals else Decimal(1)
        value = Decimal(str(number or 0)).quantize(q, rounding=ROUND_HALF_UP)
        text = f"{value:,.{decimals}f}"
        # swap through a placeholder so "," and "." can trade places
        return text.replace(",", "\0").replace(".", self.decimal_separator).replace("\0", self.thousand_separator)

    def format_currency(self, amount, decimals: int = 2) -> str:
        return f"{self.currency_symbol} {self.format_number(amount, decimals)}"

    def format_date(self, value):
        if not value:
            return None
        if isinstance(value, str):
            value = date.fromisoformat(value[:10])
        pattern = "".join(_DATE_TOKENS.get(ch, ch) for ch in self.date_format)
        if isinstance(value, datetime):
            value = value.date()
        return value.strftime(pattern)

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from simple_history.models import HistoricalRecords


class Warehouse(models.Model):
    name = models.CharField(max_length=255)
    address = models.TextField(blank=True, default="")
    contact_person = models.CharField(max_length=255, blank=True, default="")
    contact_number = models.CharField(max_length=50, blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class StockBalance(models.Model):
    """Current quantity of one product in one warehouse. Never negative.

    Only inventory.services.stock writes quantity, always under a row lock.
    """
    product = models.ForeignKey("masterdata.Product", on_delete=models.PROTECT, related_name="stock_balances")
    warehouse = models.ForeignKey(Warehouse, on_delete=models.PROTECT, related_name="stock_balances")

    quantity = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    average_cost = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))

    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        ordering = ["warehouse__name", "product__code"]
        constraints = [
            models.UniqueConstraint(fields=["product", "warehouse"], name="uniq_stock_balance_product_warehouse"),
            models.CheckConstraint(condition=models.Q(quantity__gte=0), name="stock_balance_quantity_non_negative"),
        ]

    def __str__(self):
        return f"{self.product} @ {self.warehouse}: {self.quantity}"

    @property
    def value(self) -> Decimal:
        return (self.quantity * self.product.purchase_price).quantize(Decimal("0.01"))


class StockMovement(models.Model):
    """Immutable record of one quantity change at one warehouse."""

    class Type(models.TextChoices):
        PURCHASE = "purchase", "Purchase"
        SALE = "sale", "Sale"
        TRANSFER = "transfer", "Transfer"
        ADJUSTMENT_IN = "adjustment_in", "Adjustment (in)"
        ADJUSTMENT_OUT = "adjustment_out", "Adjustment (out)"

    reference_number = models.CharField(max_length=50, unique=True)
    type = models.CharField(max_length=20, choices=Type.choices)
    transaction_date = models.DateField()

    warehouse = models.ForeignKey(Warehouse, on_delete=models.PROTECT, related_name="stock_movements")
    product = models.ForeignKey("masterdata.Product", on_delete=models.PROTECT, related_name="stock_movements")

    quantity = models.DecimalField(max_digits=15, decimal_places=2)
    unit_price = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    remarks = models.TextField(blank=True, default="")

    related_journal_entry = models.ForeignKey(
        "ledger.JournalEntry", null=True, blank=True, on_delete=models.SET_NULL, related_name="stock_movements"
    )

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="stock_movements")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-transaction_date", "-id"]
        indexes = [models.Index(fields=["product", "warehouse", "transaction_date"], name="inv_move_prod_wh_date_idx")]

    def __str__(self):
        return f"{self.reference_number} {self.get_type_display()} {self.quantity}"

    @property
    def total_value(self) -> Decimal:
        return (self.quantity * self.unit_price).quantize(Decimal("0.01"))

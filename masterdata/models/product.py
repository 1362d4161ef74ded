from decimal import Decimal

from django.conf import settings
from django.db import models


class ProductCategory(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "product categories"

    def __str__(self):
        return self.name


class Product(models.Model):
    """Stock-keeping item. Quantities live in inventory.StockBalance per warehouse."""

    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    category = models.ForeignKey(ProductCategory, on_delete=models.PROTECT, related_name="products")

    # pieces, kg, liter, ...
    unit = models.CharField(max_length=20)

    purchase_price = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    selling_price = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    reorder_level = models.IntegerField(default=10)
    is_active = models.BooleanField(default=True)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} {self.name}"

    def total_stock(self) -> Decimal:
        total = self.stock_balances.aggregate(q=models.Sum("quantity"))["q"]
        return total or Decimal("0.00")

    def needs_reorder(self) -> bool:
        return self.total_stock() <= self.reorder_level

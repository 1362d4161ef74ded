from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("ledger", "0001_initial"),
        ("masterdata", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Warehouse",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("address", models.TextField(blank=True, default="")),
                ("contact_person", models.CharField(blank=True, default="", max_length=255)),
                ("contact_number", models.CharField(blank=True, default="", max_length=50)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="StockBalance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))])),
                ("average_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_balances", to="masterdata.product")),
                ("warehouse", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_balances", to="inventory.warehouse")),
            ],
            options={
                "ordering": ["warehouse__name", "product__code"],
                "constraints": [
                    models.UniqueConstraint(fields=("product", "warehouse"), name="uniq_stock_balance_product_warehouse"),
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 0)), name="stock_balance_quantity_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("reference_number", models.CharField(max_length=50, unique=True)),
                ("type", models.CharField(choices=[("purchase", "Purchase"), ("sale", "Sale"), ("transfer", "Transfer"), ("adjustment_in", "Adjustment (in)"), ("adjustment_out", "Adjustment (out)")], max_length=20)),
                ("transaction_date", models.DateField()),
                ("quantity", models.DecimalField(decimal_places=2, max_digits=15)),
                ("unit_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("remarks", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("created_by", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_movements", to=settings.AUTH_USER_MODEL)),
                ("product", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_movements", to="masterdata.product")),
                ("related_journal_entry", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="stock_movements", to="ledger.journalentry")),
                ("warehouse", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_movements", to="inventory.warehouse")),
            ],
            options={
                "ordering": ["-transaction_date", "-id"],
                "indexes": [models.Index(fields=["product", "warehouse", "transaction_date"], name="inv_move_prod_wh_date_idx")],
            },
        ),
        migrations.CreateModel(
            name="HistoricalStockBalance",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))])),
                ("average_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                ("history_type", models.CharField(choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")], max_length=1)),
                ("history_user", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("product", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to="masterdata.product")),
                ("warehouse", models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name="+", to="inventory.warehouse")),
            ],
            options={
                "verbose_name": "historical stock balance",
                "verbose_name_plural": "historical stock balances",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]

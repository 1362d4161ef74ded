from decimal import Decimal

import django.core.serializers.json
import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models

ROLE_CHOICES = [("admin", "Admin"), ("accountant", "Accountant"), ("manager", "Manager"), ("user", "User")]

COMPANY_FIELDS = [
    ("name", models.CharField(max_length=255)),
    ("legal_name", models.CharField(blank=True, default="", max_length=255)),
    ("tax_identification_number", models.CharField(blank=True, default="", max_length=50)),
    ("registration_number", models.CharField(blank=True, default="", max_length=50)),
    ("address", models.TextField()),
    ("city", models.CharField(blank=True, default="", max_length=100)),
    ("state", models.CharField(blank=True, default="", max_length=100)),
    ("postal_code", models.CharField(blank=True, default="", max_length=20)),
    ("country", models.CharField(max_length=100)),
    ("phone", models.CharField(max_length=20)),
    ("email", models.EmailField(blank=True, default="", max_length=255)),
    ("website", models.CharField(blank=True, default="", max_length=255)),
    ("currency", models.CharField(max_length=10)),
    ("currency_symbol", models.CharField(max_length=5)),
    ("date_format", models.CharField(max_length=20)),
    ("time_format", models.CharField(max_length=20)),
    ("timezone", models.CharField(max_length=100)),
    ("fiscal_year_start_month", models.CharField(max_length=20)),
    ("decimal_separator", models.CharField(max_length=1)),
    ("thousand_separator", models.CharField(max_length=1)),
    ("invoice_prefix", models.CharField(max_length=10)),
    ("purchase_prefix", models.CharField(max_length=10)),
    ("sales_prefix", models.CharField(max_length=10)),
    ("receipt_prefix", models.CharField(max_length=10)),
    ("payment_prefix", models.CharField(max_length=10)),
    ("journal_prefix", models.CharField(max_length=10)),
]


def company_fields():
    return [(name, field.clone()) for name, field in COMPANY_FIELDS]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("ledger", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=ROLE_CHOICES, default="user", max_length=20)),
                ("phone", models.CharField(blank=True, default="", max_length=20)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="profile", to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="NumberSeries",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=50, unique=True)),
                ("prefix", models.CharField(blank=True, default="", max_length=50)),
                ("next_number", models.IntegerField(default=1)),
                ("min_width", models.IntegerField(default=5)),
            ],
            options={
                "verbose_name_plural": "number series",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.CharField(blank=True, default="", max_length=255)),
                ("action", models.CharField(max_length=50)),
                ("module", models.CharField(default="general", max_length=50)),
                ("object_type", models.CharField(blank=True, default="", max_length=100)),
                ("reference_id", models.CharField(blank=True, default="", max_length=64)),
                ("old_values", models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True)),
                ("new_values", models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True)),
                ("properties", models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True)),
                ("description", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="audit_logs", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="core_audit_user_created_idx"),
                    models.Index(fields=["module", "reference_id"], name="core_audit_module_ref_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CompanySetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                *company_fields(),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "company settings",
                "verbose_name_plural": "company settings",
            },
        ),
        migrations.CreateModel(
            name="HistoricalCompanySetting",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                *company_fields(),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                ("history_type", models.CharField(choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")], max_length=1)),
                ("history_user", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "historical company settings",
                "verbose_name_plural": "historical company settings",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="TaxSetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("rate", models.DecimalField(decimal_places=2, help_text="Percentage, 0-100", max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal("0")), django.core.validators.MaxValueValidator(Decimal("100"))])),
                ("description", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("account", models.ForeignKey(help_text="Liability account the tax is posted to", on_delete=django.db.models.deletion.PROTECT, related_name="tax_settings", to="ledger.chartofaccount")),
            ],
            options={
                "ordering": ["name"],
            },
        ),
    ]

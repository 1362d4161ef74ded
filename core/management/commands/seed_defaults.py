from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from core.models import CompanySetting, Role, UserProfile
from ledger.models import AccountCategory, ChartOfAccount

CATEGORIES = [
    ("Assets", AccountCategory.Type.ASSET),
    ("Liabilities", AccountCategory.Type.LIABILITY),
    ("Equity", AccountCategory.Type.EQUITY),
    ("Revenue", AccountCategory.Type.REVENUE),
    ("Expense", AccountCategory.Type.EXPENSE),
]

# (code, name, category type)
STARTER_ACCOUNTS = [
    ("1000", "Cash in Hand", AccountCategory.Type.ASSET),
    ("1100", "Bank", AccountCategory.Type.ASSET),
    ("1200", "Accounts Receivable", AccountCategory.Type.ASSET),
    ("1300", "Inventory", AccountCategory.Type.ASSET),
    ("2000", "Accounts Payable", AccountCategory.Type.LIABILITY),
    ("2100", "VAT Payable", AccountCategory.Type.LIABILITY),
    ("3000", "Owner's Capital", AccountCategory.Type.EQUITY),
    ("4000", "Sales Revenue", AccountCategory.Type.REVENUE),
    ("5000", "Cost of Goods Sold", AccountCategory.Type.EXPENSE),
    ("5100", "Salaries", AccountCategory.Type.EXPENSE),
]


class Command(BaseCommand):
    help = "Create company settings, the five account categories, a starter chart of accounts and optionally an admin user"

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", default="", help="Create (or promote) this user as admin")
        parser.add_argument("--admin-password", default="", help="Password for a newly created admin user")

    @transaction.atomic
    def handle(self, *args, **opts):
        CompanySetting.get_default()

        categories = {}
        for name, category_type in CATEGORIES:
            category, _ = AccountCategory.objects.get_or_create(type=category_type, name=name)
            categories[category_type] = category

        created = 0
        for code, name, category_type in STARTER_ACCOUNTS:
            _, was_created = ChartOfAccount.objects.get_or_create(
                account_code=code,
                defaults={"name": name, "category": categories[category_type]},
            )
            created += int(was_created)

        self.stdout.write(self.style.SUCCESS(f"Accounts created: {created}, existing: {len(STARTER_ACCOUNTS) - created}"))

        email = (opts["admin_email"] or "").strip().lower()
        if email:
            self._ensure_admin(email, opts["admin_password"])

    def _ensure_admin(self, email, password):
        User = get_user_model()
        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            if len(password) < 8:
                raise CommandError("--admin-password (min. 8 characters) is required to create a new admin")
            user = User.objects.create_user(username=email, email=email, password=password, first_name="Administrator")
            self.stdout.write(self.style.SUCCESS(f"Admin user created: {email}"))

        UserProfile.objects.update_or_create(user=user, defaults={"role": Role.ADMIN})
        self.stdout.write(self.style.SUCCESS(f"{email} has role admin"))

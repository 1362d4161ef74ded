import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model

from core.models import Role, UserProfile
from ledger.models import AccountCategory, ChartOfAccount, FinancialYear, JournalEntry, JournalItem


def make_user(email="accountant@example.com", role=Role.ACCOUNTANT):
    user = get_user_model().objects.create_user(username=email, email=email, password="password123")
    UserProfile.objects.create(user=user, role=role)
    return user


def make_accounts():
    """Cash (asset), Capital (equity), Sales (revenue), Rent (expense), VAT (liability)."""
    categories = {
        t: AccountCategory.objects.create(name=str(label), type=t)
        for t, label in AccountCategory.Type.choices
    }
    return {
        "cash": ChartOfAccount.objects.create(account_code="1000", name="Cash", category=categories["Asset"]),
        "vat": ChartOfAccount.objects.create(account_code="2100", name="VAT Payable", category=categories["Liability"]),
        "capital": ChartOfAccount.objects.create(account_code="3000", name="Capital", category=categories["Equity"]),
        "sales": ChartOfAccount.objects.create(account_code="4000", name="Sales", category=categories["Revenue"]),
        "rent": ChartOfAccount.objects.create(account_code="5000", name="Rent", category=categories["Expense"]),
    }


def make_year(start=datetime.date(2024, 1, 1), end=datetime.date(2024, 12, 31), active=True, name=None):
    return FinancialYear.objects.create(
        name=name or FinancialYear.generate_name(start, end), start_date=start, end_date=end, is_active=active
    )


def make_entry(user, year, reference, lines, entry_date=datetime.date(2024, 3, 1)):
    """lines: (account, "debit"|"credit", amount)"""
    entry = JournalEntry.objects.create(
        reference_number=reference, financial_year=year, entry_date=entry_date,
        narration=reference, created_by=user,
    )
    for account, side, amount in lines:
        JournalItem.objects.create(journal_entry=entry, account=account, type=side, amount=Decimal(amount))
    return entry

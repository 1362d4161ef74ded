"""Account balances, always recomputed from posted journal items."""

from decimal import Decimal

from django.db.models import Q, Sum

from ledger.models import AccountCategory, ChartOfAccount, JournalEntry, JournalItem

DEBIT_NORMAL = (AccountCategory.Type.ASSET, AccountCategory.Type.EXPENSE)

_POSTED = Q(journal_entry__status=JournalEntry.Status.POSTED)


def _q2(x) -> Decimal:
    return (x or Decimal("0.00")).quantize(Decimal("0.01"))


def normal_side(category_type: str) -> str:
    return "debit" if category_type in DEBIT_NORMAL else "credit"


def signed_balance(category_type: str, debit: Decimal, credit: Decimal) -> Decimal:
    if normal_side(category_type) == "debit":
        return _q2(debit - credit)
    return _q2(credit - debit)


def account_totals(account: ChartOfAccount):
    """(debit, credit) over the account's items of posted entries."""
    agg = JournalItem.objects.filter(_POSTED, account=account).aggregate(
        debit=Sum("amount", filter=Q(type=JournalItem.Type.DEBIT)),
        credit=Sum("amount", filter=Q(type=JournalItem.Type.CREDIT)),
    )
    return _q2(agg["debit"]), _q2(agg["credit"])


def account_balance(account: ChartOfAccount) -> Decimal:
    """
    Asset and Expense accounts are debit-normal (debit - credit),
    Liability, Equity and Revenue are credit-normal (credit - debit).
    """
    debit, credit = account_totals(account)
    return signed_balance(account.category.type, debit, credit)


def trial_balance(accounts=None):
    """
    One row per account: {"account", "debit", "credit", "balance"}.
    Computed in a single aggregate query.
    """
    if accounts is None:
        accounts = ChartOfAccount.objects.active()

    qs = accounts.select_related("category").annotate(
        debit_total=Sum(
            "journal_items__amount",
            filter=Q(journal_items__type=JournalItem.Type.DEBIT,
                     journal_items__journal_entry__status=JournalEntry.Status.POSTED),
        ),
        credit_total=Sum(
            "journal_items__amount",
            filter=Q(journal_items__type=JournalItem.Type.CREDIT,
                     journal_items__journal_entry__status=JournalEntry.Status.POSTED),
        ),
    )

    rows = []
    for acc in qs:
        debit, credit = _q2(acc.debit_total), _q2(acc.credit_total)
        rows.append({
            "account": acc,
            "debit": debit,
            "credit": credit,
            "balance": signed_balance(acc.category.type, debit, credit),
        })
    return rows

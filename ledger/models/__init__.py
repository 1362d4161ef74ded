from .category import AccountCategory
from .account import ChartOfAccount
from .financial_year import FinancialYear
from .journal import JournalEntry
from .journal_item import JournalItem

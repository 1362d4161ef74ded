from decimal import Decimal

from django.contrib.auth.decorators import login_required
from django.db.models import F, Sum
from django.shortcuts import render

from core.models import AuditLog
from core.permissions import ACCOUNTING_ROLES, INVENTORY_ROLES, has_role
from inventory.models import StockBalance, Warehouse
from ledger.models import FinancialYear, JournalEntry
from masterdata.models import Product


@login_required
def dashboard(request):
    """Landing page: key figures the user's role is allowed to see."""
    context = {"active_year": FinancialYear.get_active()}

    if has_role(request.user, *ACCOUNTING_ROLES):
        context["draft_journals"] = JournalEntry.objects.filter(status=JournalEntry.Status.DRAFT).count()
        context["posted_journals"] = JournalEntry.objects.filter(status=JournalEntry.Status.POSTED).count()

    if has_role(request.user, *INVENTORY_ROLES):
        stock_value = StockBalance.objects.aggregate(
            v=Sum(F("quantity") * F("product__purchase_price"))
        )["v"] or Decimal("0.00")

        low_stock = (
            Product.objects
            .filter(is_active=True)
            .annotate(stock=Sum("stock_balances__quantity"))
            .filter(stock__lte=F("reorder_level"))
            .order_by("code")[:10]
        )
        context.update({
            "warehouse_count": Warehouse.objects.filter(is_active=True).count(),
            "product_count": Product.objects.filter(is_active=True).count(),
            "stock_value": stock_value,
            "low_stock": low_stock,
        })

    context["recent_activity"] = AuditLog.objects.filter(user=request.user).select_related("user")[:10]
    return render(request, "masterdata/dashboard.html", context)

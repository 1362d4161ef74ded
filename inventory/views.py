import logging

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db.models import DecimalField, F, Q, Sum
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_http_methods

from core.exceptions import ProtectedRecordError
from core.models import AuditLog
from core.permissions import INVENTORY_ROLES, role_required
from core.services.records import guarded_delete, save_with_audit, toggle_active
from core.views.common import clean_date_param, clean_param, filter_status, flash_unexpected
from inventory.forms import StockAdjustmentForm, StockTransferForm, WarehouseForm
from inventory.models import StockMovement, Warehouse
from inventory.services.stock import InsufficientStock, adjust_stock, transfer_stock
from masterdata.models import Product

logger = logging.getLogger(__name__)

WAREHOUSE_FIELDS = ["name", "address", "contact_person", "contact_number", "is_active"]


def _stock_value():
    return Coalesce(
        Sum(F("stock_balances__quantity") * F("stock_balances__product__purchase_price"),
            output_field=DecimalField(max_digits=20, decimal_places=2)),
        0,
        output_field=DecimalField(max_digits=20, decimal_places=2),
    )


# ---------------------------------------------------------------------------
# Warehouses
# ---------------------------------------------------------------------------

@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET"])
def warehouse_list(request):
    search = clean_param(request, "search")
    status = clean_param(request, "status")

    qs = Warehouse.objects.annotate(stock_value=_stock_value()).order_by("name")
    if search:
        qs = qs.filter(
            Q(name__icontains=search) | Q(address__icontains=search) | Q(contact_person__icontains=search)
        )
    qs = filter_status(qs, status)

    return render(request, "inventory/warehouse_list.html", {
        "warehouses": qs,
        "filters": {"search": search, "status": status},
    })


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET", "POST"])
def warehouse_create(request):
    if request.method == "POST":
        form = WarehouseForm(request.POST)
        if form.is_valid():
            warehouse = save_with_audit(form, user=request.user, fields=WAREHOUSE_FIELDS, request=request)
            messages.success(request, _("Warehouse created: %(name)s") % {"name": warehouse.name})
            return redirect("inventory:warehouse-list")
    else:
        form = WarehouseForm(initial={"is_active": True})

    return render(request, "inventory/warehouse_form.html", {"form": form, "warehouse": None})


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET"])
def warehouse_detail(request, pk: int):
    warehouse = get_object_or_404(Warehouse, pk=pk)
    balances = (
        warehouse.stock_balances
        .filter(product__is_active=True)
        .select_related("product", "product__category")
        .order_by("product__code")
    )
    movements = warehouse.stock_movements.select_related("product").order_by("-transaction_date", "-id")[:20]
    total_value = sum((b.value for b in balances), 0)
    return render(request, "inventory/warehouse_detail.html", {
        "warehouse": warehouse,
        "balances": balances,
        "movements": movements,
        "total_value": total_value,
    })


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET", "POST"])
def warehouse_edit(request, pk: int):
    warehouse = get_object_or_404(Warehouse, pk=pk)

    if request.method == "POST":
        form = WarehouseForm(request.POST, instance=warehouse)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=WAREHOUSE_FIELDS, request=request)
            messages.success(request, _("Warehouse updated."))
            return redirect("inventory:warehouse-detail", pk=warehouse.pk)
    else:
        form = WarehouseForm(instance=warehouse)

    return render(request, "inventory/warehouse_form.html", {"form": form, "warehouse": warehouse})


@role_required(*INVENTORY_ROLES)
@require_http_methods(["POST"])
def warehouse_toggle_status(request, pk: int):
    warehouse = get_object_or_404(Warehouse, pk=pk)
    active = toggle_active(warehouse, user=request.user, request=request)
    messages.success(request, _("Warehouse activated.") if active else _("Warehouse deactivated."))
    return redirect("inventory:warehouse-list")


@role_required(*INVENTORY_ROLES)
@require_http_methods(["POST"])
def warehouse_delete(request, pk: int):
    warehouse = get_object_or_404(Warehouse, pk=pk)
    try:
        guarded_delete(
            warehouse,
            user=request.user,
            fields=WAREHOUSE_FIELDS,
            action=AuditLog.Action.DELETED,
            checks=[
                (warehouse.stock_balances.all(), _("Cannot delete warehouse with stock balances.")),
                (warehouse.stock_movements.all(), _("Cannot delete warehouse with stock movements.")),
            ],
            request=request,
        )
    except ProtectedRecordError as e:
        messages.error(request, str(e))
        return redirect("inventory:warehouse-list")

    messages.success(request, _("Warehouse deleted."))
    return redirect("inventory:warehouse-list")


# ---------------------------------------------------------------------------
# Stock movements
# ---------------------------------------------------------------------------

@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET"])
def movement_list(request):
    search = clean_param(request, "search")
    movement_type = clean_param(request, "type")
    warehouse_id = clean_param(request, "warehouse_id")
    product_id = clean_param(request, "product_id")
    start_date = clean_date_param(request, "start_date")
    end_date = clean_date_param(request, "end_date")

    qs = StockMovement.objects.select_related("warehouse", "product", "created_by").order_by("-transaction_date", "-id")
    if search:
        qs = qs.filter(
            Q(reference_number__icontains=search)
            | Q(remarks__icontains=search)
            | Q(product__name__icontains=search)
            | Q(product__code__icontains=search)
        )
    if movement_type in StockMovement.Type.values:
        qs = qs.filter(type=movement_type)
    if warehouse_id.isdigit():
        qs = qs.filter(warehouse_id=int(warehouse_id))
    if product_id.isdigit():
        qs = qs.filter(product_id=int(product_id))
    if start_date:
        qs = qs.filter(transaction_date__gte=start_date)
    if end_date:
        qs = qs.filter(transaction_date__lte=end_date)

    return render(request, "inventory/movement_list.html", {
        "movements": qs,
        "types": StockMovement.Type.choices,
        "warehouses": Warehouse.objects.order_by("name"),
        "products": Product.objects.order_by("code"),
        "filters": {
            "search": search,
            "type": movement_type,
            "warehouse_id": warehouse_id,
            "product_id": product_id,
            "start_date": start_date.isoformat() if start_date else "",
            "end_date": end_date.isoformat() if end_date else "",
        },
    })


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET"])
def movement_detail(request, pk: int):
    movement = get_object_or_404(
        StockMovement.objects.select_related("warehouse", "product", "created_by", "related_journal_entry"),
        pk=pk,
    )
    return render(request, "inventory/movement_detail.html", {"movement": movement})


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET", "POST"])
def stock_transfer(request):
    if request.method == "POST":
        form = StockTransferForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                reference = transfer_stock(
                    product=data["product"],
                    from_warehouse=data["from_warehouse"],
                    to_warehouse=data["to_warehouse"],
                    quantity=data["quantity"],
                    transaction_date=data["transaction_date"],
                    remarks=data["remarks"],
                    user=request.user,
                    request=request,
                )
            except InsufficientStock as e:
                form.add_error("quantity", str(e))
            except ValidationError as e:
                form.add_error(None, e)
            except Exception as e:
                flash_unexpected(request, e)
            else:
                messages.success(request, _("Stock transferred: %(ref)s") % {"ref": reference})
                return redirect("inventory:movement-list")
    else:
        form = StockTransferForm()

    return render(request, "inventory/stock_transfer.html", {"form": form})


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET", "POST"])
def stock_adjust(request):
    if request.method == "POST":
        form = StockAdjustmentForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                movement = adjust_stock(
                    product=data["product"],
                    warehouse=data["warehouse"],
                    quantity=data["quantity"],
                    direction=data["direction"],
                    transaction_date=data["transaction_date"],
                    remarks=data["remarks"],
                    user=request.user,
                    request=request,
                )
            except InsufficientStock as e:
                form.add_error("quantity", str(e))
            except ValidationError as e:
                form.add_error(None, e)
            except Exception as e:
                flash_unexpected(request, e)
            else:
                messages.success(request, _("Stock adjusted: %(ref)s") % {"ref": movement.reference_number})
                return redirect("inventory:movement-detail", pk=movement.pk)
    else:
        form = StockAdjustmentForm()

    return render(request, "inventory/stock_adjust.html", {"form": form})

import logging

from django.contrib import messages
from django.db.models import Count, Q, Sum
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_http_methods

from core.exceptions import ProtectedRecordError
from core.models import AuditLog
from core.permissions import INVENTORY_ROLES, role_required
from core.services.records import guarded_delete, save_with_audit, toggle_active
from core.views.common import clean_param, filter_status
from masterdata.forms.productForm import ProductCategoryForm, ProductForm
from masterdata.models import Product, ProductCategory

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ["code", "name", "category", "unit", "purchase_price", "selling_price", "reorder_level", "is_active"]
CATEGORY_FIELDS = ["name", "description", "is_active"]


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET", "POST"])
def product_list(request):
    if request.method == "POST":
        form = ProductForm(request.POST)
        if form.is_valid():
            form.instance.created_by = request.user
            product = save_with_audit(form, user=request.user, fields=PRODUCT_FIELDS, request=request)
            messages.success(request, _("Product created: %(code)s") % {"code": product.code})
            return redirect("masterdata:product-list")
    else:
        form = ProductForm(initial={"is_active": True})

    search = clean_param(request, "search")
    category_id = clean_param(request, "category_id")
    status = clean_param(request, "status")

    products = (
        Product.objects
        .select_related("category")
        .annotate(stock=Sum("stock_balances__quantity"))
        .order_by("code")
    )
    if search:
        products = products.filter(Q(name__icontains=search) | Q(code__icontains=search))
    if category_id.isdigit():
        products = products.filter(category_id=int(category_id))
    products = filter_status(products, status)

    return render(request, "masterdata/product_list.html", {
        "products": products,
        "form": form,
        "categories": ProductCategory.objects.order_by("name"),
        "filters": {"search": search, "category_id": category_id, "status": status},
    })


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET"])
def product_detail(request, pk):
    product = get_object_or_404(Product.objects.select_related("category"), pk=pk)
    balances = product.stock_balances.select_related("warehouse").order_by("warehouse__name")
    movements = product.stock_movements.select_related("warehouse").order_by("-transaction_date", "-id")[:20]
    return render(request, "masterdata/product_detail.html", {
        "product": product,
        "balances": balances,
        "movements": movements,
    })


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET", "POST"])
def product_edit(request, pk):
    product = get_object_or_404(Product, pk=pk)

    if request.method == "POST":
        form = ProductForm(request.POST, instance=product)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=PRODUCT_FIELDS, request=request)
            messages.success(request, _("Product updated."))
            return redirect("masterdata:product-detail", pk=product.pk)
    else:
        form = ProductForm(instance=product)

    return render(request, "masterdata/product_form.html", {"form": form, "product": product})


@role_required(*INVENTORY_ROLES)
@require_http_methods(["POST"])
def product_toggle_status(request, pk):
    product = get_object_or_404(Product, pk=pk)
    active = toggle_active(product, user=request.user, request=request)
    messages.success(request, _("Product activated.") if active else _("Product deactivated."))
    return redirect("masterdata:product-list")


@role_required(*INVENTORY_ROLES)
@require_http_methods(["POST"])
def product_delete(request, pk):
    product = get_object_or_404(Product, pk=pk)
    try:
        details = guarded_delete(
            product,
            user=request.user,
            fields=PRODUCT_FIELDS,
            action=AuditLog.Action.DELETED,
            checks=[
                (product.stock_movements.all(), _("Cannot delete product with stock movements.")),
                (product.stock_balances.all(), _("Cannot delete product with stock balances.")),
            ],
            request=request,
        )
    except ProtectedRecordError as e:
        messages.error(request, str(e))
        return redirect("masterdata:product-list")

    messages.success(request, _("Product deleted: %(code)s") % {"code": details["code"]})
    return redirect("masterdata:product-list")


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET", "POST"])
def category_list(request):
    if request.method == "POST":
        form = ProductCategoryForm(request.POST)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=CATEGORY_FIELDS, request=request)
            messages.success(request, _("Product category created."))
            return redirect("masterdata:product-category-list")
    else:
        form = ProductCategoryForm(initial={"is_active": True})

    categories = ProductCategory.objects.annotate(product_count=Count("products")).order_by("name")
    return render(request, "masterdata/product_category_list.html", {"categories": categories, "form": form})


@role_required(*INVENTORY_ROLES)
@require_http_methods(["GET", "POST"])
def category_edit(request, pk):
    category = get_object_or_404(ProductCategory, pk=pk)

    if request.method == "POST":
        form = ProductCategoryForm(request.POST, instance=category)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=CATEGORY_FIELDS, request=request)
            messages.success(request, _("Product category updated."))
            return redirect("masterdata:product-category-list")
    else:
        form = ProductCategoryForm(instance=category)

    return render(request, "masterdata/product_category_form.html", {"form": form, "category": category})


@role_required(*INVENTORY_ROLES)
@require_http_methods(["POST"])
def category_delete(request, pk):
    category = get_object_or_404(ProductCategory, pk=pk)
    try:
        guarded_delete(
            category,
            user=request.user,
            fields=CATEGORY_FIELDS,
            action=AuditLog.Action.DELETED,
            checks=[(category.products.all(), _("Cannot delete category with products."))],
            request=request,
        )
    except ProtectedRecordError as e:
        messages.error(request, str(e))
        return redirect("masterdata:product-category-list")

    messages.success(request, _("Product category deleted."))
    return redirect("masterdata:product-category-list")

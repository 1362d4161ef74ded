from django.urls import path

from masterdata.views.dashboard import dashboard
from masterdata.views.products import (
    category_delete,
    category_edit,
    category_list,
    product_delete,
    product_detail,
    product_edit,
    product_list,
    product_toggle_status,
)

app_name = "masterdata"

urlpatterns = [
    path("", dashboard, name="dashboard"),

    # Products
    path("products/", product_list, name="product-list"),
    path("products/<int:pk>/", product_detail, name="product-detail"),
    path("products/<int:pk>/edit/", product_edit, name="product-edit"),
    path("products/<int:pk>/toggle-status/", product_toggle_status, name="product-toggle-status"),
    path("products/<int:pk>/delete/", product_delete, name="product-delete"),

    # Categories
    path("product-categories/", category_list, name="product-category-list"),
    path("product-categories/<int:pk>/edit/", category_edit, name="product-category-edit"),
    path("product-categories/<int:pk>/delete/", category_delete, name="product-category-delete"),
]

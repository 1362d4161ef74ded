from django.urls import path
from . import views

app_name = "inventory"

urlpatterns = [
    path("warehouses/", views.warehouse_list, name="warehouse-list"),
    path("warehouses/new/", views.warehouse_create, name="warehouse-create"),
    path("warehouses/<int:pk>/", views.warehouse_detail, name="warehouse-detail"),
    path("warehouses/<int:pk>/edit/", views.warehouse_edit, name="warehouse-edit"),
    path("warehouses/<int:pk>/toggle-status/", views.warehouse_toggle_status, name="warehouse-toggle-status"),
    path("warehouses/<int:pk>/delete/", views.warehouse_delete, name="warehouse-delete"),

    path("stock-movements/", views.movement_list, name="movement-list"),
    path("stock-movements/<int:pk>/", views.movement_detail, name="movement-detail"),
    path("stock-movements/transfer/", views.stock_transfer, name="stock-transfer"),
    path("stock-movements/adjust/", views.stock_adjust, name="stock-adjust"),
]

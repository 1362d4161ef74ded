import datetime
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from core.models import AuditLog, NumberSeries, Role, UserProfile
from inventory.models import StockBalance, StockMovement, Warehouse
from inventory.services.stock import InsufficientStock, adjust_stock, transfer_stock
from masterdata.models import Product, ProductCategory

TODAY = datetime.date(2024, 6, 1)


def make_manager(email="manager@example.com"):
    user = get_user_model().objects.create_user(username=email, email=email, password="password123")
    UserProfile.objects.create(user=user, role=Role.MANAGER)
    return user


class StockServiceTests(TestCase):

    def setUp(self):
        self.user = make_manager()
        category = ProductCategory.objects.create(name="Beverages")
        self.product = Product.objects.create(
            code="P-001", name="Tea 500g", category=category, unit="pcs",
            purchase_price=Decimal("120.00"), selling_price=Decimal("150.00"),
        )
        self.main = Warehouse.objects.create(name="Main")
        self.branch = Warehouse.objects.create(name="Branch")
        StockBalance.objects.create(
            product=self.product, warehouse=self.main, quantity=Decimal("10.00"), average_cost=Decimal("120.00")
        )

    def _qty(self, warehouse):
        balance = StockBalance.objects.filter(product=self.product, warehouse=warehouse).first()
        return balance.quantity if balance else Decimal("0.00")

    """ a transfer moves quantity without creating or losing any """
    def test_transfer_conserves_quantity(self):
        reference = transfer_stock(
            product=self.product, from_warehouse=self.main, to_warehouse=self.branch,
            quantity=Decimal("4"), transaction_date=TODAY, user=self.user,
        )

        self.assertEqual(reference, "TRF-00001")
        self.assertEqual(self._qty(self.main), Decimal("6.00"))
        self.assertEqual(self._qty(self.branch), Decimal("4.00"))
        self.assertEqual(self._qty(self.main) + self._qty(self.branch), Decimal("10.00"))

        refs = set(StockMovement.objects.values_list("reference_number", flat=True))
        self.assertEqual(refs, {"TRF-00001-OUT", "TRF-00001-IN"})
        log = AuditLog.objects.get(action=AuditLog.Action.TRANSFERRED_STOCK)
        self.assertEqual(log.module, "inventory")
        self.assertEqual(log.properties["reference_number"], "TRF-00001")

    def test_insufficient_stock_writes_nothing(self):
        with self.assertRaises(InsufficientStock) as ctx:
            transfer_stock(
                product=self.product, from_warehouse=self.main, to_warehouse=self.branch,
                quantity=Decimal("10.01"), transaction_date=TODAY, user=self.user,
            )

        self.assertEqual(ctx.exception.available, Decimal("10.00"))
        self.assertEqual(self._qty(self.main), Decimal("10.00"))
        self.assertFalse(StockBalance.objects.filter(warehouse=self.branch).exists())
        self.assertFalse(StockMovement.objects.exists())
        self.assertFalse(NumberSeries.objects.filter(code="TRF").exists())
        self.assertFalse(AuditLog.objects.exists())

    """ a failure while auditing undoes the balances, movements and the TRF number """
    def test_transfer_rolls_back_when_audit_fails(self):
        with mock.patch("inventory.services.stock.log_activity", side_effect=RuntimeError("audit down")):
            with self.assertRaises(RuntimeError):
                transfer_stock(
                    product=self.product, from_warehouse=self.main, to_warehouse=self.branch,
                    quantity=Decimal("4"), transaction_date=TODAY, user=self.user,
                )

        self.assertEqual(self._qty(self.main), Decimal("10.00"))
        self.assertFalse(StockBalance.objects.filter(warehouse=self.branch).exists())
        self.assertFalse(StockMovement.objects.exists())
        self.assertFalse(NumberSeries.objects.filter(code="TRF").exists())

    def test_transfer_from_warehouse_without_balance(self):
        with self.assertRaises(InsufficientStock):
            transfer_stock(
                product=self.product, from_warehouse=self.branch, to_warehouse=self.main,
                quantity=Decimal("1"), transaction_date=TODAY, user=self.user,
            )

    def test_same_warehouse_rejected(self):
        with self.assertRaises(ValidationError):
            transfer_stock(
                product=self.product, from_warehouse=self.main, to_warehouse=self.main,
                quantity=Decimal("1"), transaction_date=TODAY, user=self.user,
            )

    def test_adjust_add_creates_balance(self):
        movement = adjust_stock(
            product=self.product, warehouse=self.branch, quantity=Decimal("5"), direction="add",
            transaction_date=TODAY, remarks="Found in count", user=self.user,
        )

        self.assertEqual(movement.reference_number, "ADJ-IN-00001")
        self.assertEqual(movement.type, StockMovement.Type.ADJUSTMENT_IN)
        self.assertEqual(self._qty(self.branch), Decimal("5.00"))
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.Action.ADJUSTED_STOCK).exists())

    def test_adjust_subtract(self):
        movement = adjust_stock(
            product=self.product, warehouse=self.main, quantity=Decimal("3"), direction="subtract",
            transaction_date=TODAY, user=self.user,
        )
        self.assertEqual(movement.reference_number, "ADJ-OUT-00001")
        self.assertEqual(movement.total_value, Decimal("360.00"))
        self.assertEqual(self._qty(self.main), Decimal("7.00"))

    def test_adjust_subtract_beyond_stock(self):
        with self.assertRaises(InsufficientStock):
            adjust_stock(
                product=self.product, warehouse=self.main, quantity=Decimal("11"), direction="subtract",
                transaction_date=TODAY, user=self.user,
            )
        self.assertEqual(self._qty(self.main), Decimal("10.00"))

    def test_quantity_minimum(self):
        with self.assertRaises(ValidationError):
            adjust_stock(
                product=self.product, warehouse=self.main, quantity=Decimal("0"), direction="add",
                transaction_date=TODAY, user=self.user,
            )


class WarehouseViewTests(TestCase):

    def setUp(self):
        self.user = make_manager()
        self.client.force_login(self.user)
        category = ProductCategory.objects.create(name="Beverages")
        self.product = Product.objects.create(code="P-001", name="Tea", category=category, unit="pcs")
        self.main = Warehouse.objects.create(name="Main")
        self.branch = Warehouse.objects.create(name="Branch")

    def test_warehouse_with_stock_protected(self):
        StockBalance.objects.create(product=self.product, warehouse=self.main, quantity=Decimal("1"))
        self.client.post(reverse("inventory:warehouse-delete", args=[self.main.pk]))
        self.assertTrue(Warehouse.objects.filter(pk=self.main.pk).exists())

    def test_empty_warehouse_deleted(self):
        self.client.post(reverse("inventory:warehouse-delete", args=[self.branch.pk]))
        self.assertFalse(Warehouse.objects.filter(pk=self.branch.pk).exists())
        self.assertTrue(AuditLog.objects.filter(module="warehouses", action=AuditLog.Action.DELETED).exists())

    def test_toggle_status(self):
        self.client.post(reverse("inventory:warehouse-toggle-status", args=[self.main.pk]))
        self.main.refresh_from_db()
        self.assertFalse(self.main.is_active)

    def test_transfer_view(self):
        StockBalance.objects.create(product=self.product, warehouse=self.main, quantity=Decimal("8"))
        response = self.client.post(reverse("inventory:stock-transfer"), {
            "product": self.product.pk,
            "from_warehouse": self.main.pk,
            "to_warehouse": self.branch.pk,
            "quantity": "2",
            "transaction_date": "2024-06-01",
            "remarks": "",
        })
        self.assertRedirects(response, reverse("inventory:movement-list"))
        self.assertEqual(StockMovement.objects.count(), 2)

    def test_transfer_form_rejects_same_warehouse(self):
        StockBalance.objects.create(product=self.product, warehouse=self.main, quantity=Decimal("8"))
        response = self.client.post(reverse("inventory:stock-transfer"), {
            "product": self.product.pk,
            "from_warehouse": self.main.pk,
            "to_warehouse": self.main.pk,
            "quantity": "2",
            "transaction_date": "2024-06-01",
        })
        self.assertEqual(response.status_code, 200)
        self.assertIn("to_warehouse", response.context["form"].errors)
        self.assertFalse(StockMovement.objects.exists())

    def test_accountant_forbidden(self):
        accountant = get_user_model().objects.create_user(username="acc", email="acc@example.com", password="x" * 8)
        UserProfile.objects.create(user=accountant, role=Role.ACCOUNTANT)
        self.client.force_login(accountant)
        self.assertEqual(self.client.get(reverse("inventory:warehouse-list")).status_code, 403)

    def test_list_and_movements_render(self):
        self.assertEqual(self.client.get(reverse("inventory:warehouse-list")).status_code, 200)
        self.assertEqual(self.client.get(reverse("inventory:movement-list")).status_code, 200)

    """ an impossible date in the query string is ignored instead of failing the page """
    def test_movement_list_ignores_impossible_dates(self):
        adjust_stock(product=self.product, warehouse=self.main, quantity=Decimal("3"), direction="add",
                     transaction_date=TODAY, user=self.user)
        response = self.client.get(reverse("inventory:movement-list"), {"start_date": "2024-13-45", "end_date": "2024-02-30"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context["movements"]), 1)
        self.assertEqual(response.context["filters"]["end_date"], "")

    def test_movement_list_date_range(self):
        adjust_stock(product=self.product, warehouse=self.main, quantity=Decimal("3"), direction="add",
                     transaction_date=datetime.date(2024, 1, 10), user=self.user)
        adjust_stock(product=self.product, warehouse=self.main, quantity=Decimal("1"), direction="add",
                     transaction_date=TODAY, user=self.user)
        response = self.client.get(reverse("inventory:movement-list"), {"end_date": "2024-03-31"})

        self.assertEqual([m.transaction_date for m in response.context["movements"]], [datetime.date(2024, 1, 10)])
        self.assertEqual(response.context["filters"]["end_date"], "2024-03-31")

import datetime

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from core.models import AuditLog, Role, UserProfile
from hr.forms import EmployeeForm
from hr.models import Department, Designation, Employee

User = get_user_model()


def make_user(email, role):
    user = User.objects.create_user(username=email, email=email, password="password123")
    UserProfile.objects.create(user=user, role=role)
    return user


class DesignationEndpointTests(TestCase):

    def setUp(self):
        self.client.force_login(make_user("manager@example.com", Role.MANAGER))
        self.sales = Department.objects.create(name="Sales")
        Designation.objects.create(name="Sales Officer", department=self.sales)
        Designation.objects.create(name="Area Manager", department=self.sales)
        Designation.objects.create(name="Retired Role", department=self.sales, is_active=False)

    def test_active_designations_of_department(self):
        response = self.client.get(reverse("hr:designations-by-department"), {"department_id": self.sales.pk})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([d["name"] for d in response.json()], ["Area Manager", "Sales Officer"])

    def test_unknown_department(self):
        response = self.client.get(reverse("hr:designations-by-department"), {"department_id": 9999})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json(), {"error": "Invalid department"})

    def test_missing_department(self):
        response = self.client.get(reverse("hr:designations-by-department"))
        self.assertEqual(response.status_code, 422)

    def test_accountant_forbidden(self):
        self.client.force_login(make_user("acc@example.com", Role.ACCOUNTANT))
        response = self.client.get(reverse("hr:designations-by-department"), {"department_id": self.sales.pk})
        self.assertEqual(response.status_code, 403)


class DepartmentTests(TestCase):

    def setUp(self):
        self.manager = make_user("manager@example.com", Role.MANAGER)
        self.client.force_login(self.manager)

    def test_create_department(self):
        response = self.client.post(reverse("hr:department-list"), {
            "name": "Accounts", "description": "", "manager": self.manager.pk, "is_active": "on",
        })
        self.assertRedirects(response, reverse("hr:department-list"))
        self.assertTrue(Department.objects.filter(name="Accounts").exists())
        self.assertTrue(AuditLog.objects.filter(module="departments", action=AuditLog.Action.CREATED).exists())

    def test_designation_with_employees_protected(self):
        department = Department.objects.create(name="Sales")
        designation = Designation.objects.create(name="Sales Officer", department=department)
        Employee.objects.create(
            user=make_user("emp@example.com", Role.USER), employee_id="EMP-001",
            department=department, designation=designation, joining_date=datetime.date(2024, 1, 1),
        )

        self.client.post(reverse("hr:designation-delete", args=[designation.pk]))
        self.assertTrue(Designation.objects.filter(pk=designation.pk).exists())

        self.client.post(reverse("hr:department-delete", args=[department.pk]))
        self.assertTrue(Department.objects.filter(pk=department.pk).exists())

    def test_toggle_and_delete_unused_department(self):
        department = Department.objects.create(name="Legal")
        self.client.post(reverse("hr:department-toggle-status", args=[department.pk]))
        department.refresh_from_db()
        self.assertFalse(department.is_active)

        self.client.post(reverse("hr:department-delete", args=[department.pk]))
        self.assertFalse(Department.objects.filter(pk=department.pk).exists())

    def test_lists_render(self):
        self.assertEqual(self.client.get(reverse("hr:department-list")).status_code, 200)
        self.assertEqual(self.client.get(reverse("hr:designation-list")).status_code, 200)


class EmployeeFormTests(TestCase):

    def test_designation_must_belong_to_department(self):
        sales = Department.objects.create(name="Sales")
        finance = Department.objects.create(name="Finance")
        cashier = Designation.objects.create(name="Cashier", department=finance)
        user = make_user("emp@example.com", Role.USER)

        form = EmployeeForm({
            "user": user.pk,
            "employee_id": "EMP-002",
            "department": sales.pk,
            "designation": cashier.pk,
            "joining_date": "2024-01-01",
            "employment_status": Employee.EmploymentStatus.PERMANENT,
            "is_active": "on",
        })
        self.assertFalse(form.is_valid())
        self.assertIn("designation", form.errors)

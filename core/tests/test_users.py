import datetime

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from core.exceptions import ProtectedRecordError, SelfActionError
from core.forms.user_forms import UserForm
from core.models import AuditLog, Role, UserProfile
from core.permissions import has_role, user_role
from core.services import users as user_service
from hr.models import Department, Designation, Employee
from ledger.models import FinancialYear, JournalEntry

User = get_user_model()


def make_user(email, role=Role.USER, **extra):
    user = User.objects.create_user(username=email, email=email, password="password123", **extra)
    UserProfile.objects.create(user=user, role=role)
    return user


class RoleTests(TestCase):

    def test_profile_role(self):
        self.assertEqual(user_role(make_user("acc@example.com", Role.ACCOUNTANT)), Role.ACCOUNTANT)

    def test_superuser_counts_as_admin(self):
        root = User.objects.create_superuser(username="root", email="root@example.com", password="password123")
        self.assertTrue(has_role(root, Role.ADMIN))

    def test_user_without_profile_is_plain_user(self):
        bare = User.objects.create_user(username="bare", password="password123")
        self.assertEqual(user_role(bare), Role.USER)


class UserFormTests(TestCase):

    def _data(self, **overrides):
        data = {
            "name": "Rahim Uddin",
            "email": "Rahim@Example.com",
            "role": Role.MANAGER,
            "phone": "01700000000",
            "password": "password123",
            "password_confirmation": "password123",
            "is_active": "on",
        }
        data.update(overrides)
        return data

    def test_create_sets_username_and_name(self):
        admin = make_user("admin@example.com", Role.ADMIN)
        form = UserForm(self._data())
        self.assertTrue(form.is_valid(), form.errors)

        user = user_service.save_user(form, actor=admin)

        self.assertEqual(user.username, "rahim@example.com")
        self.assertEqual(user.first_name, "Rahim Uddin")
        self.assertTrue(user.check_password("password123"))
        self.assertEqual(user.profile.role, Role.MANAGER)
        self.assertTrue(
            AuditLog.objects.filter(action=AuditLog.Action.CREATED, module="users", reference_id=str(user.pk)).exists()
        )

    def test_email_is_unique_case_insensitive(self):
        make_user("rahim@example.com")
        form = UserForm(self._data(email="RAHIM@example.com"))
        self.assertFalse(form.is_valid())
        self.assertIn("email", form.errors)

    def test_password_confirmation_must_match(self):
        form = UserForm(self._data(password_confirmation="different1"))
        self.assertFalse(form.is_valid())
        self.assertIn("password_confirmation", form.errors)

    def test_short_password_rejected(self):
        form = UserForm(self._data(password="short", password_confirmation="short"))
        self.assertFalse(form.is_valid())
        self.assertIn("password", form.errors)

    def test_password_optional_on_update(self):
        user = make_user("karim@example.com", Role.USER, first_name="Karim")
        form = UserForm(self._data(email="karim@example.com", password="", password_confirmation=""), instance=user)
        self.assertTrue(form.is_valid(), form.errors)
        user_service.save_user(form, actor=user)

        user.refresh_from_db()
        self.assertTrue(user.check_password("password123"))
        self.assertEqual(user.profile.role, Role.MANAGER)


class UserGuardTests(TestCase):

    def setUp(self):
        self.admin = make_user("admin@example.com", Role.ADMIN)
        self.other = make_user("other@example.com", Role.ACCOUNTANT)

    def test_cannot_delete_self(self):
        with self.assertRaises(SelfActionError):
            user_service.delete_user(self.admin, actor=self.admin)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_cannot_deactivate_self(self):
        with self.assertRaises(SelfActionError):
            user_service.toggle_user_status(self.admin, actor=self.admin)
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.is_active)

    def test_toggle_other_user(self):
        self.assertFalse(user_service.toggle_user_status(self.other, actor=self.admin))
        log = AuditLog.objects.get(action=AuditLog.Action.TOGGLED_STATUS)
        self.assertEqual(log.properties, {"old_status": True, "new_status": False})

    def test_cannot_delete_user_with_journal_entries(self):
        year = FinancialYear.objects.create(
            name="2024-2024", start_date=datetime.date(2024, 1, 1), end_date=datetime.date(2024, 12, 31), is_active=True
        )
        JournalEntry.objects.create(
            reference_number="JE-00001", financial_year=year, entry_date=datetime.date(2024, 2, 1),
            narration="Opening", created_by=self.other,
        )
        with self.assertRaises(ProtectedRecordError):
            user_service.delete_user(self.other, actor=self.admin)
        self.assertTrue(User.objects.filter(pk=self.other.pk).exists())

    def test_cannot_delete_user_linked_to_employee(self):
        department = Department.objects.create(name="Sales")
        designation = Designation.objects.create(name="Sales Officer", department=department)
        Employee.objects.create(
            user=self.other, employee_id="EMP-001", department=department, designation=designation,
            joining_date=datetime.date(2023, 1, 1),
        )
        with self.assertRaises(ProtectedRecordError):
            user_service.delete_user(self.other, actor=self.admin)

    def test_delete_writes_audit_snapshot(self):
        pk = self.other.pk
        user_service.delete_user(self.other, actor=self.admin)

        self.assertFalse(User.objects.filter(pk=pk).exists())
        log = AuditLog.objects.get(action=AuditLog.Action.DELETED)
        self.assertEqual(log.reference_id, str(pk))
        self.assertEqual(log.properties["email"], "other@example.com")

    def test_reset_password(self):
        user_service.reset_password(self.other, "new-password1", actor=self.admin)
        self.other.refresh_from_db()
        self.assertTrue(self.other.check_password("new-password1"))
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.Action.RESET_PASSWORD).exists())


class UserViewTests(TestCase):

    def setUp(self):
        self.admin = make_user("admin@example.com", Role.ADMIN)
        self.client.force_login(self.admin)

    def test_list_requires_admin(self):
        self.client.force_login(make_user("plain@example.com"))
        response = self.client.get(reverse("core:user-list"))
        self.assertEqual(response.status_code, 403)

    def test_anonymous_is_redirected_to_login(self):
        self.client.logout()
        response = self.client.get(reverse("core:user-list"))
        self.assertEqual(response.status_code, 302)

    def test_list_renders(self):
        response = self.client.get(reverse("core:user-list"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "admin@example.com")

    def test_self_toggle_is_rejected(self):
        self.client.post(reverse("core:user-toggle-status", args=[self.admin.pk]))
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.is_active)

    def test_audit_log_is_append_only(self):
        other = make_user("other@example.com")
        self.client.post(reverse("core:user-toggle-status", args=[other.pk]))
        log = AuditLog.objects.get(action=AuditLog.Action.TOGGLED_STATUS)
        self.assertEqual(log.user, self.admin)
        with self.assertRaises(ValueError):
            log.save()

    def test_status_filter(self):
        make_user("gone@example.com", is_active=False)
        response = self.client.get(reverse("core:user-list"), {"status": "inactive"})
        self.assertEqual([u.email for u in response.context["users"]], ["gone@example.com"])

    """ changing your own password keeps the current session valid """
    def test_own_password_change_keeps_session(self):
        response = self.client.post(reverse("core:user-edit", args=[self.admin.pk]), {
            "name": "Admin",
            "email": "admin@example.com",
            "role": Role.ADMIN,
            "password": "new-password-456",
            "password_confirmation": "new-password-456",
            "is_active": "on",
        })
        self.assertRedirects(response, reverse("core:user-detail", args=[self.admin.pk]))

        self.admin.refresh_from_db()
        self.assertTrue(self.admin.check_password("new-password-456"))
        self.assertEqual(self.client.get(reverse("core:user-list")).status_code, 200)

    def test_own_password_reset_keeps_session(self):
        self.client.post(reverse("core:user-reset-password", args=[self.admin.pk]), {
            "password": "new-password-456", "password_confirmation": "new-password-456",
        })
        self.assertEqual(self.client.get(reverse("core:user-list")).status_code, 200)

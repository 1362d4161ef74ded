import datetime
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from core.exceptions import ProtectedRecordError
from core.models import AuditLog
from ledger.forms import FinancialYearForm
from ledger.models import FinancialYear
from ledger.services import financial_years
from ledger.services.financial_years import ranges_overlap

from .helpers import make_entry, make_user, make_year

D = datetime.date


class OverlapPredicateTests(TestCase):

    def test_disjoint(self):
        self.assertFalse(ranges_overlap(D(2024, 1, 1), D(2024, 12, 31), D(2025, 1, 1), D(2025, 12, 31)))

    """ a shared boundary day counts as overlap """
    def test_touching_boundary(self):
        self.assertTrue(ranges_overlap(D(2024, 1, 1), D(2024, 12, 31), D(2024, 12, 31), D(2025, 12, 30)))

    def test_contained(self):
        self.assertTrue(ranges_overlap(D(2024, 1, 1), D(2024, 12, 31), D(2024, 3, 1), D(2024, 4, 1)))

    def test_enclosing(self):
        self.assertTrue(ranges_overlap(D(2024, 3, 1), D(2024, 4, 1), D(2024, 1, 1), D(2024, 12, 31)))


class SaveFinancialYearTests(TestCase):

    def setUp(self):
        self.user = make_user()

    def _form(self, **data):
        payload = {"name": "", "start_date": "2025-01-01", "end_date": "2025-12-31"}
        payload.update(data)
        return FinancialYearForm(payload)

    def test_name_is_generated(self):
        form = self._form()
        self.assertTrue(form.is_valid(), form.errors)
        year = financial_years.save_financial_year(form, user=self.user)
        self.assertEqual(year.name, "2025-2025")

    def test_end_must_follow_start(self):
        form = self._form(start_date="2025-06-01", end_date="2025-06-01")
        self.assertFalse(form.is_valid())
        self.assertIn("end_date", form.errors)

    def test_overlap_rejected(self):
        make_year(active=False)
        form = self._form(name="FY 24/25", start_date="2024-07-01", end_date="2025-06-30")
        self.assertTrue(form.is_valid(), form.errors)

        with self.assertRaises(ValidationError) as ctx:
            financial_years.save_financial_year(form, user=self.user)
        self.assertEqual(ctx.exception.code, "date_range")
        self.assertEqual(FinancialYear.objects.count(), 1)

    """ editing a year does not clash with its own stored range """
    def test_edit_excludes_self(self):
        year = make_year(active=False)
        form = FinancialYearForm(
            {"name": year.name, "start_date": "2024-01-01", "end_date": "2024-12-30"}, instance=year
        )
        self.assertTrue(form.is_valid(), form.errors)
        financial_years.save_financial_year(form, user=self.user)
        year.refresh_from_db()
        self.assertEqual(year.end_date, D(2024, 12, 30))

    def test_saving_active_year_deactivates_others(self):
        old = make_year(active=True)
        form = self._form(is_active="on")
        self.assertTrue(form.is_valid(), form.errors)
        new = financial_years.save_financial_year(form, user=self.user)

        old.refresh_from_db()
        self.assertFalse(old.is_active)
        self.assertTrue(new.is_active)
        self.assertEqual(FinancialYear.objects.filter(is_active=True).count(), 1)

    """ a failing audit write leaves the previous active year in place """
    def test_save_rolls_back_when_audit_fails(self):
        old = make_year(active=True)
        form = self._form(is_active="on")
        self.assertTrue(form.is_valid(), form.errors)

        with mock.patch("core.services.records.log_activity", side_effect=RuntimeError("audit down")):
            with self.assertRaises(RuntimeError):
                financial_years.save_financial_year(form, user=self.user)

        old.refresh_from_db()
        self.assertTrue(old.is_active)
        self.assertEqual(list(FinancialYear.objects.all()), [old])


class ActivateTests(TestCase):

    def test_only_one_active(self):
        user = make_user()
        first = make_year(D(2023, 1, 1), D(2023, 12, 31), active=True)
        second = make_year(D(2024, 1, 1), D(2024, 12, 31), active=False)

        financial_years.activate(second, user=user)

        first.refresh_from_db()
        self.assertFalse(first.is_active)
        self.assertEqual(FinancialYear.get_active(), second)
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.Action.ACTIVATED, reference_id=str(second.pk)).exists())

    def test_activate_rolls_back_when_audit_fails(self):
        user = make_user()
        first = make_year(D(2023, 1, 1), D(2023, 12, 31), active=True)
        second = make_year(D(2024, 1, 1), D(2024, 12, 31), active=False)

        with mock.patch("ledger.services.financial_years.log_activity", side_effect=RuntimeError("audit down")):
            with self.assertRaises(RuntimeError):
                financial_years.activate(second, user=user)

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertTrue(first.is_active)
        self.assertFalse(second.is_active)
        self.assertFalse(AuditLog.objects.exists())

    def test_contains(self):
        year = make_year()
        self.assertTrue(year.contains(D(2024, 1, 1)))
        self.assertTrue(year.contains(D(2024, 12, 31)))
        self.assertFalse(year.contains(D(2025, 1, 1)))


class DeleteFinancialYearTests(TestCase):

    def setUp(self):
        self.user = make_user()

    def test_active_year_protected(self):
        year = make_year(active=True)
        with self.assertRaises(ProtectedRecordError):
            financial_years.delete_financial_year(year, user=self.user)

    def test_year_with_entries_protected(self):
        make_year(D(2025, 1, 1), D(2025, 12, 31), active=True)
        year = make_year(active=False)
        make_entry(self.user, year, "JE-1", [])
        with self.assertRaises(ProtectedRecordError):
            financial_years.delete_financial_year(year, user=self.user)

    def test_delete(self):
        year = make_year(active=False)
        financial_years.delete_financial_year(year, user=self.user)
        self.assertFalse(FinancialYear.objects.exists())


class FinancialYearViewTests(TestCase):

    def setUp(self):
        self.client.force_login(make_user())

    def test_overlap_shows_form_error(self):
        make_year(active=False)
        response = self.client.post(reverse("ledger:financial-year-create"), {
            "name": "", "start_date": "2024-06-01", "end_date": "2025-05-31",
        })
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["form"].has_error("__all__", code="date_range"))
        self.assertEqual(FinancialYear.objects.count(), 1)

    def test_create_redirects(self):
        response = self.client.post(reverse("ledger:financial-year-create"), {
            "name": "", "start_date": "2025-01-01", "end_date": "2025-12-31", "is_active": "on",
        })
        self.assertRedirects(response, reverse("ledger:financial-year-list"))
        self.assertEqual(FinancialYear.get_active().name, "2025-2025")

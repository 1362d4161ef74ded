import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from core.models import AuditLog
from ledger.models import JournalEntry
from ledger.services import journals

from .helpers import make_accounts, make_entry, make_user, make_year


class JournalLifecycleTests(TestCase):

    def setUp(self):
        self.user = make_user()
        self.accounts = make_accounts()
        self.year = make_year()
        self.entry = make_entry(self.user, self.year, "JE-00001", [
            (self.accounts["cash"], "debit", "100.00"),
            (self.accounts["capital"], "credit", "100.00"),
        ])

    def test_totals(self):
        self.assertEqual(self.entry.totals(), (Decimal("100.00"), Decimal("100.00")))
        self.assertTrue(self.entry.is_balanced())

    def test_post(self):
        posted = journals.post_entry(self.entry, user=self.user)

        self.assertEqual(posted.status, JournalEntry.Status.POSTED)
        self.assertIsNotNone(posted.posted_at)
        log = AuditLog.objects.get(action=AuditLog.Action.POSTED)
        self.assertEqual(log.properties["amount"], "100.00")

    def test_post_twice_rejected(self):
        journals.post_entry(self.entry, user=self.user)
        with self.assertRaises(ValidationError):
            journals.post_entry(self.entry, user=self.user)

    def test_unbalanced_cannot_be_posted(self):
        entry = make_entry(self.user, self.year, "JE-00002", [
            (self.accounts["cash"], "debit", "100.00"),
            (self.accounts["capital"], "credit", "90.00"),
        ])
        with self.assertRaises(ValidationError):
            journals.post_entry(entry, user=self.user)
        entry.refresh_from_db()
        self.assertEqual(entry.status, JournalEntry.Status.DRAFT)

    def test_cancel_posted(self):
        journals.post_entry(self.entry, user=self.user)
        cancelled = journals.cancel_entry(self.entry, user=self.user)

        self.assertEqual(cancelled.status, JournalEntry.Status.CANCELLED)
        log = AuditLog.objects.get(action=AuditLog.Action.CANCELLED)
        self.assertEqual(log.properties["previous_status"], "posted")

    def test_cancel_twice_rejected(self):
        journals.cancel_entry(self.entry, user=self.user)
        with self.assertRaises(ValidationError):
            journals.cancel_entry(self.entry, user=self.user)

    def test_posted_cannot_be_deleted(self):
        journals.post_entry(self.entry, user=self.user)
        with self.assertRaises(ValidationError):
            journals.delete_entry(self.entry, user=self.user)

    def test_delete_draft(self):
        journals.delete_entry(self.entry, user=self.user)
        self.assertFalse(JournalEntry.objects.exists())
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.Action.DELETED, object_type="JournalEntry").exists())


class JournalViewTests(TestCase):

    def setUp(self):
        self.user = make_user()
        self.accounts = make_accounts()
        self.client.force_login(self.user)

    def _payload(self, debit="250.00", credit="250.00"):
        return {
            "reference_number": "",
            "entry_date": "2024-05-10",
            "narration": "Cash sale",
            "items-TOTAL_FORMS": "2",
            "items-INITIAL_FORMS": "0",
            "items-MIN_NUM_FORMS": "0",
            "items-MAX_NUM_FORMS": "1000",
            "items-0-account": str(self.accounts["cash"].pk),
            "items-0-type": "debit",
            "items-0-amount": debit,
            "items-1-account": str(self.accounts["sales"].pk),
            "items-1-type": "credit",
            "items-1-amount": credit,
        }

    def test_create_requires_active_year(self):
        response = self.client.get(reverse("ledger:journal-create"))
        self.assertRedirects(response, reverse("ledger:financial-year-list"))

    def test_create_allocates_reference(self):
        make_year()
        response = self.client.post(reverse("ledger:journal-create"), self._payload())

        entry = JournalEntry.objects.get()
        self.assertRedirects(response, reverse("ledger:journal-detail", args=[entry.pk]))
        self.assertEqual(entry.reference_number, "JE-00001")
        self.assertEqual(entry.status, JournalEntry.Status.DRAFT)
        self.assertEqual(entry.total_debit, Decimal("250.00"))

    def test_unbalanced_is_rejected(self):
        make_year()
        response = self.client.post(reverse("ledger:journal-create"), self._payload(credit="200.00"))

        self.assertEqual(response.status_code, 200)
        self.assertFalse(JournalEntry.objects.exists())

    def test_plain_user_forbidden(self):
        self.client.force_login(make_user("plain@example.com", role="user"))
        response = self.client.get(reverse("ledger:journal-list"))
        self.assertEqual(response.status_code, 403)

    def test_edit_with_blank_reference_keeps_existing_number(self):
        year = make_year()
        entry = make_entry(self.user, year, "JE-00001", [])
        response = self.client.post(reverse("ledger:journal-edit", args=[entry.pk]), self._payload())

        self.assertRedirects(response, reverse("ledger:journal-detail", args=[entry.pk]))
        entry.refresh_from_db()
        self.assertEqual(entry.reference_number, "JE-00001")
        self.assertEqual(entry.total_debit, Decimal("250.00"))

    def test_list_ignores_impossible_dates(self):
        year = make_year()
        make_entry(self.user, year, "JE-00001", [])
        response = self.client.get(reverse("ledger:journal-list"), {"start_date": "2024-13-45", "end_date": "soon"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context["journals"]), 1)
        self.assertEqual(response.context["filters"]["start_date"], "")

    def test_list_filters_by_date_range(self):
        year = make_year()
        make_entry(self.user, year, "JE-00001", [], entry_date=datetime.date(2024, 2, 1))
        make_entry(self.user, year, "JE-00002", [], entry_date=datetime.date(2024, 6, 1))
        response = self.client.get(reverse("ledger:journal-list"), {"start_date": "2024-05-01"})

        self.assertEqual([j.reference_number for j in response.context["journals"]], ["JE-00002"])

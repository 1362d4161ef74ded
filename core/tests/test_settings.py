import datetime
from decimal import Decimal

from django.template import Context, Template
from django.test import TestCase

from core.forms.settings_forms import TaxSettingForm
from core.models import CompanySetting, NumberSeries, TaxSetting
from ledger.models import AccountCategory, ChartOfAccount


class CompanySettingTests(TestCase):

    """ get_default() creates the row once and always returns pk=1 """
    def test_singleton(self):
        first = CompanySetting.get_default()
        second = CompanySetting.get_default()

        self.assertEqual(first.pk, CompanySetting.SINGLETON_PK)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(CompanySetting.objects.count(), 1)
        self.assertEqual(first.currency, "BDT")

    """ saving a fresh instance overwrites the single row instead of adding one """
    def test_save_keeps_single_row(self):
        CompanySetting.get_default()
        other = CompanySetting(**{**CompanySetting.DEFAULTS, "name": "Other Co"})
        other.save()

        self.assertEqual(CompanySetting.objects.count(), 1)
        self.assertEqual(CompanySetting.get_default().name, "Other Co")

    def test_format_number_default_separators(self):
        setting = CompanySetting.get_default()
        self.assertEqual(setting.format_number(1234567.891), "1,234,567.89")
        self.assertEqual(setting.format_number(None), "0.00")

    def test_format_number_swapped_separators(self):
        setting = CompanySetting.get_default()
        setting.decimal_separator = ","
        setting.thousand_separator = "."
        self.assertEqual(setting.format_number(Decimal("1234.5")), "1.234,50")

    def test_format_currency(self):
        setting = CompanySetting.get_default()
        self.assertEqual(setting.format_currency(1500), "৳ 1,500.00")

    def test_format_date(self):
        setting = CompanySetting.get_default()
        self.assertEqual(setting.format_date(datetime.date(2024, 3, 5)), "05/03/2024")
        self.assertEqual(setting.format_date("2024-12-31"), "31/12/2024")
        self.assertIsNone(setting.format_date(None))

    """ every save is kept by django-simple-history """
    def test_history_is_recorded(self):
        setting = CompanySetting.get_default()
        setting.name = "Renamed"
        setting.save()
        self.assertEqual(setting.history.count(), 2)


class CompanyFormatFilterTests(TestCase):

    def _render(self, source, **context):
        return Template("{% load company_format %}" + source).render(Context(context))

    def test_date_follows_company_format(self):
        setting = CompanySetting.get_default()
        setting.date_format = "Y-m-d"
        setting.save()
        self.assertEqual(self._render("{{ d|company_date:company }}", d=datetime.date(2024, 3, 5), company=setting), "2024-03-05")

    """ without a company argument the stored row is used """
    def test_falls_back_to_stored_setting(self):
        self.assertEqual(self._render("{{ d|company_date }}", d=datetime.date(2024, 3, 5)), "05/03/2024")
        self.assertEqual(self._render("{{ v|company_money }}", v=Decimal("1500")), "৳ 1,500.00")

    def test_blank_values_render_empty(self):
        self.assertEqual(self._render("[{{ d|company_date }}][{{ v|company_money }}]", d=None, v=None), "[][]")


class NumberSeriesTests(TestCase):

    def test_next_for_creates_and_increments(self):
        self.assertEqual(NumberSeries.next_for("TRF", prefix="TRF-", min_width=5), "TRF-00001")
        self.assertEqual(NumberSeries.next_for("TRF", prefix="TRF-", min_width=5), "TRF-00002")

    def test_series_are_independent(self):
        NumberSeries.next_for("ADJ-IN", prefix="ADJ-IN-")
        self.assertEqual(NumberSeries.next_for("ADJ-OUT", prefix="ADJ-OUT-"), "ADJ-OUT-00001")

    def test_existing_series_keeps_its_prefix(self):
        NumberSeries.objects.create(code="JE", prefix="J/", next_number=41, min_width=3)
        self.assertEqual(NumberSeries.next_for("JE", prefix="ignored-"), "J/041")


class TaxSettingTests(TestCase):

    def test_str_shows_rate(self):
        liabilities = AccountCategory.objects.create(name="Liabilities", type=AccountCategory.Type.LIABILITY)
        account = ChartOfAccount.objects.create(account_code="2100", name="VAT Payable", category=liabilities)
        tax = TaxSetting.objects.create(name="VAT", rate=Decimal("15.00"), account=account)

        self.assertEqual(str(tax), "VAT (15.00%)")


class TaxSettingFormTests(TestCase):

    def setUp(self):
        liabilities = AccountCategory.objects.create(name="Liabilities", type=AccountCategory.Type.LIABILITY)
        assets = AccountCategory.objects.create(name="Assets", type=AccountCategory.Type.ASSET)
        self.vat = ChartOfAccount.objects.create(account_code="2100", name="VAT Payable", category=liabilities)
        self.cash = ChartOfAccount.objects.create(account_code="1000", name="Cash", category=assets)

    def _form(self, account, rate="15"):
        return TaxSettingForm({"name": "VAT", "rate": rate, "account": account.pk, "is_active": "on"})

    def test_liability_account_accepted(self):
        self.assertTrue(self._form(self.vat).is_valid())

    def test_non_liability_account_rejected(self):
        form = self._form(self.cash)
        self.assertFalse(form.is_valid())
        self.assertIn("account", form.errors)

    def test_rate_range(self):
        form = self._form(self.vat, rate="101")
        self.assertFalse(form.is_valid())
        self.assertIn("rate", form.errors)

from django import forms

from core.models import CompanySetting, TaxSetting
from ledger.models import AccountCategory, ChartOfAccount

MONTHS = [(m, m) for m in (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)]


class CompanySettingForm(forms.ModelForm):
    fiscal_year_start_month = forms.ChoiceField(choices=MONTHS)

    class Meta:
        model = CompanySetting
        exclude = ["updated_at"]
        widgets = {"address": forms.Textarea(attrs={"rows": 3})}


class TaxSettingForm(forms.ModelForm):
    class Meta:
        model = TaxSetting
        fields = ["name", "rate", "account", "description", "is_active"]
        widgets = {"description": forms.Textarea(attrs={"rows": 3})}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # liabilities only: collected tax is owed to the authority
        self.fields["account"].queryset = (
            ChartOfAccount.objects
            .active()
            .by_type(AccountCategory.Type.LIABILITY)
            .order_by("account_code")
        )

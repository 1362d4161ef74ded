from decimal import Decimal, InvalidOperation

from django import forms
from django.core.exceptions import ValidationError
from django.forms import BaseInlineFormSet, inlineformset_factory
from django.utils.translation import gettext as _

from ledger.models import AccountCategory, ChartOfAccount, FinancialYear, JournalEntry, JournalItem

DATE_INPUT = forms.DateInput(attrs={"type": "date"}, format="%Y-%m-%d")


class AccountCategoryForm(forms.ModelForm):
    class Meta:
        model = AccountCategory
        fields = ["name", "type", "description"]
        widgets = {"description": forms.Textarea(attrs={"rows": 3})}


class ChartOfAccountForm(forms.ModelForm):
    class Meta:
        model = ChartOfAccount
        fields = ["account_code", "name", "category", "description", "is_active"]
        widgets = {"description": forms.Textarea(attrs={"rows": 3})}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["category"].queryset = AccountCategory.objects.order_by("type", "name")


class FinancialYearForm(forms.ModelForm):
    """Field-level checks only. Overlap is checked by the service under a lock."""

    class Meta:
        model = FinancialYear
        fields = ["name", "start_date", "end_date", "is_active"]
        widgets = {"start_date": DATE_INPUT, "end_date": DATE_INPUT}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["start_date"].input_formats = ["%Y-%m-%d"]
        self.fields["end_date"].input_formats = ["%Y-%m-%d"]
        self.fields["name"].required = False

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start_date"), cleaned.get("end_date")
        if start and end and end <= start:
            self.add_error("end_date", _("The end date must be after the start date."))
        elif start and end and not cleaned.get("name"):
            cleaned["name"] = FinancialYear.generate_name(start, end)
            self.instance.name = cleaned["name"]
        return cleaned


class JournalEntryForm(forms.ModelForm):
    class Meta:
        model = JournalEntry
        fields = ["reference_number", "entry_date", "narration"]
        widgets = {
            "entry_date": DATE_INPUT,
            "narration": forms.Textarea(attrs={"rows": 2}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["entry_date"].input_formats = ["%Y-%m-%d"]
        # blank -> allocated from the JE number series
        self.fields["reference_number"].required = False


class JournalItemForm(forms.ModelForm):
    class Meta:
        model = JournalItem
        fields = ["account", "type", "amount", "description"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["account"].queryset = ChartOfAccount.objects.active().select_related("category")


class BaseJournalItemFormSet(BaseInlineFormSet):
    """
    At least two lines, and debits must equal credits.
    """
    def clean(self):
        super().clean()

        if any(self.errors):
            return

        debit = Decimal("0")
        credit = Decimal("0")
        lines = 0

        for form in self.forms:
            if not hasattr(form, "cleaned_data"):
                continue
            if form.cleaned_data.get("DELETE"):
                continue
            if not form.has_changed() and not form.instance.pk:
                continue

            amount = form.cleaned_data.get("amount") or Decimal("0")
            try:
                amount = Decimal(amount)
            except (InvalidOperation, TypeError):
                return

            lines += 1
            if form.cleaned_data.get("type") == JournalItem.Type.DEBIT:
                debit += amount
            else:
                credit += amount

        if lines < 2:
            raise ValidationError(_("A journal entry needs at least two items."), code="too_few_items")

        if debit != credit:
            raise ValidationError(
                _("Debit and credit amounts must be equal. Debit %(debit)s vs credit %(credit)s.")
                % {"debit": f"{debit:.2f}", "credit": f"{credit:.2f}"},
                code="unbalanced",
            )


JournalItemFormSet = inlineformset_factory(
    parent_model=JournalEntry,
    model=JournalItem,
    form=JournalItemForm,
    formset=BaseJournalItemFormSet,
    extra=4,
    can_delete=True,
)

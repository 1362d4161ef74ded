from decimal import Decimal

from django import forms
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from inventory.models import Warehouse
from masterdata.models import Product

DATE_INPUT = forms.DateInput(attrs={"type": "date"}, format="%Y-%m-%d")


class WarehouseForm(forms.ModelForm):
    class Meta:
        model = Warehouse
        fields = ["name", "address", "contact_person", "contact_number", "is_active"]
        widgets = {"address": forms.Textarea(attrs={"rows": 3})}


class StockTransferForm(forms.Form):
    product = forms.ModelChoiceField(queryset=Product.objects.none())
    from_warehouse = forms.ModelChoiceField(queryset=Warehouse.objects.none(), label=_("From warehouse"))
    to_warehouse = forms.ModelChoiceField(queryset=Warehouse.objects.none(), label=_("To warehouse"))
    quantity = forms.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal("0.01"))
    transaction_date = forms.DateField(widget=DATE_INPUT, input_formats=["%Y-%m-%d"])
    remarks = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 2}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # only products that are actually on hand somewhere
        self.fields["product"].queryset = (
            Product.objects
            .filter(is_active=True, stock_balances__quantity__gt=0)
            .distinct()
            .order_by("code")
        )
        warehouses = Warehouse.objects.filter(is_active=True).order_by("name")
        self.fields["from_warehouse"].queryset = warehouses
        self.fields["to_warehouse"].queryset = warehouses
        self.fields["transaction_date"].initial = timezone.localdate

    def clean(self):
        cleaned = super().clean()
        src, dst = cleaned.get("from_warehouse"), cleaned.get("to_warehouse")
        if src and dst and src.pk == dst.pk:
            self.add_error("to_warehouse", _("Source and destination warehouses must be different."))
        return cleaned


class StockAdjustmentForm(forms.Form):
    DIRECTIONS = (("add", _("Add")), ("subtract", _("Subtract")))

    product = forms.ModelChoiceField(queryset=Product.objects.none())
    warehouse = forms.ModelChoiceField(queryset=Warehouse.objects.none())
    direction = forms.ChoiceField(choices=DIRECTIONS)
    quantity = forms.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal("0.01"))
    transaction_date = forms.DateField(widget=DATE_INPUT, input_formats=["%Y-%m-%d"])
    remarks = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 2}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["product"].queryset = Product.objects.filter(is_active=True).order_by("code")
        self.fields["warehouse"].queryset = Warehouse.objects.filter(is_active=True).order_by("name")
        self.fields["transaction_date"].initial = timezone.localdate

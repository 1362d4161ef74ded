from django import forms

from masterdata.models import Product, ProductCategory


class ProductCategoryForm(forms.ModelForm):
    class Meta:
        model = ProductCategory
        fields = ["name", "description", "is_active"]
        widgets = {"description": forms.Textarea(attrs={"rows": 3})}


class ProductForm(forms.ModelForm):
    class Meta:
        model = Product
        fields = [
            "code",
            "name",
            "category",
            "unit",
            "purchase_price",
            "selling_price",
            "reorder_level",
            "description",
            "is_active",
        ]
        widgets = {"description": forms.Textarea(attrs={"rows": 3})}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        categories = ProductCategory.objects.filter(is_active=True)
        if self.instance.pk and self.instance.category_id:
            # keep the current category selectable even when it was deactivated
            categories = categories | ProductCategory.objects.filter(pk=self.instance.category_id)
        self.fields["category"].queryset = categories.order_by("name")

    def clean(self):
        cleaned = super().clean()
        for name in ("purchase_price", "selling_price"):
            value = cleaned.get(name)
            if value is not None and value < 0:
                self.add_error(name, "Price cannot be negative.")
        reorder = cleaned.get("reorder_level")
        if reorder is not None and reorder < 0:
            self.add_error("reorder_level", "Reorder level cannot be negative.")
        return cleaned

from django import forms
from django.contrib.auth import get_user_model

from hr.models import Department, Designation, Employee

User = get_user_model()


class DepartmentForm(forms.ModelForm):
    class Meta:
        model = Department
        fields = ["name", "description", "manager", "is_active"]
        widgets = {"description": forms.Textarea(attrs={"rows": 3})}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["manager"].queryset = User.objects.filter(is_active=True).order_by("first_name", "email")


class DesignationForm(forms.ModelForm):
    class Meta:
        model = Designation
        fields = ["name", "department", "description", "is_active"]
        widgets = {"description": forms.Textarea(attrs={"rows": 3})}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        departments = Department.objects.filter(is_active=True)
        if self.instance.pk and self.instance.department_id:
            departments = departments | Department.objects.filter(pk=self.instance.department_id)
        self.fields["department"].queryset = departments.order_by("name")


class EmployeeForm(forms.ModelForm):
    class Meta:
        model = Employee
        fields = [
            "user",
            "employee_id",
            "department",
            "designation",
            "joining_date",
            "employment_status",
            "contract_end_date",
            "is_active",
        ]

    def clean(self):
        cleaned = super().clean()
        department, designation = cleaned.get("department"), cleaned.get("designation")
        if department and designation and designation.department_id != department.pk:
            self.add_error("designation", "Designation does not belong to the selected department.")
        return cleaned

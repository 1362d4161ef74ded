from django.contrib import admin
from guardian.admin import GuardedModelAdmin

from core.admin_utils import CreatorPermsAdminMixin
from hr.forms import EmployeeForm
from hr.models import Department, Designation, Employee


@admin.register(Department)
class DepartmentAdmin(CreatorPermsAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("name", "manager", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(Designation)
class DesignationAdmin(CreatorPermsAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("name", "department", "is_active")
    list_filter = ("department", "is_active")
    search_fields = ("name",)


@admin.register(Employee)
class EmployeeAdmin(CreatorPermsAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    form = EmployeeForm
    list_display = ("employee_id", "user", "department", "designation", "joining_date", "is_active")
    list_filter = ("department", "employment_status", "is_active")
    search_fields = ("employee_id", "user__email", "user__first_name")

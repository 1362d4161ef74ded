import logging

from django.contrib import messages
from django.db.models import Count, Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_http_methods

from core.exceptions import ProtectedRecordError
from core.models import AuditLog
from core.permissions import HR_ROLES, role_required
from core.services.records import guarded_delete, save_with_audit, toggle_active
from core.views.common import clean_param, filter_status
from hr.forms import DepartmentForm, DesignationForm
from hr.models import Department, Designation

logger = logging.getLogger(__name__)

DEPARTMENT_FIELDS = ["name", "description", "manager", "is_active"]
DESIGNATION_FIELDS = ["name", "department", "description", "is_active"]


# ---------------------------------------------------------------------------
# Departments
# ---------------------------------------------------------------------------

@role_required(*HR_ROLES)
@require_http_methods(["GET", "POST"])
def department_list(request):
    if request.method == "POST":
        form = DepartmentForm(request.POST)
        if form.is_valid():
            department = save_with_audit(form, user=request.user, fields=DEPARTMENT_FIELDS, request=request)
            messages.success(request, _("Department created: %(name)s") % {"name": department.name})
            return redirect("hr:department-list")
    else:
        form = DepartmentForm(initial={"is_active": True})

    search = clean_param(request, "search")
    status = clean_param(request, "status")

    departments = (
        Department.objects
        .select_related("manager")
        .annotate(
            designation_count=Count("designations", distinct=True),
            employee_count=Count("employees", distinct=True),
        )
        .order_by("name")
    )
    if search:
        departments = departments.filter(Q(name__icontains=search) | Q(description__icontains=search))
    departments = filter_status(departments, status)

    return render(request, "hr/department_list.html", {
        "departments": departments,
        "form": form,
        "filters": {"search": search, "status": status},
    })


@role_required(*HR_ROLES)
@require_http_methods(["GET", "POST"])
def department_edit(request, pk: int):
    department = get_object_or_404(Department, pk=pk)

    if request.method == "POST":
        form = DepartmentForm(request.POST, instance=department)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=DEPARTMENT_FIELDS, request=request)
            messages.success(request, _("Department updated."))
            return redirect("hr:department-list")
    else:
        form = DepartmentForm(instance=department)

    return render(request, "hr/department_form.html", {"form": form, "department": department})


@role_required(*HR_ROLES)
@require_http_methods(["POST"])
def department_delete(request, pk: int):
    department = get_object_or_404(Department, pk=pk)
    try:
        guarded_delete(
            department,
            user=request.user,
            fields=DEPARTMENT_FIELDS,
            action=AuditLog.Action.DELETED,
            checks=[
                (department.employees.all(), _("Cannot delete department with employees.")),
                (department.designations.all(), _("Cannot delete department with designations.")),
            ],
            request=request,
        )
    except ProtectedRecordError as e:
        messages.error(request, str(e))
        return redirect("hr:department-list")

    messages.success(request, _("Department deleted."))
    return redirect("hr:department-list")


@role_required(*HR_ROLES)
@require_http_methods(["POST"])
def department_toggle_status(request, pk: int):
    department = get_object_or_404(Department, pk=pk)
    active = toggle_active(department, user=request.user, request=request)
    messages.success(request, _("Department activated.") if active else _("Department deactivated."))
    return redirect("hr:department-list")


# ---------------------------------------------------------------------------
# Designations
# ---------------------------------------------------------------------------

@role_required(*HR_ROLES)
@require_http_methods(["GET", "POST"])
def designation_list(request):
    if request.method == "POST":
        form = DesignationForm(request.POST)
        if form.is_valid():
            designation = save_with_audit(form, user=request.user, fields=DESIGNATION_FIELDS, request=request)
            messages.success(request, _("Designation created: %(name)s") % {"name": designation.name})
            return redirect("hr:designation-list")
    else:
        form = DesignationForm(initial={"is_active": True})

    department_id = clean_param(request, "department_id")
    status = clean_param(request, "status")
    search = clean_param(request, "search")

    designations = (
        Designation.objects
        .select_related("department")
        .annotate(employee_count=Count("employees"))
        .order_by("name")
    )
    if department_id.isdigit():
        designations = designations.filter(department_id=int(department_id))
    designations = filter_status(designations, status)
    if search:
        designations = designations.filter(name__icontains=search)

    return render(request, "hr/designation_list.html", {
        "designations": designations,
        "departments": Department.objects.filter(is_active=True).order_by("name"),
        "form": form,
        "filters": {"department_id": department_id, "status": status, "search": search},
    })


@role_required(*HR_ROLES)
@require_http_methods(["GET", "POST"])
def designation_edit(request, pk: int):
    designation = get_object_or_404(Designation, pk=pk)

    if request.method == "POST":
        form = DesignationForm(request.POST, instance=designation)
        if form.is_valid():
            save_with_audit(form, user=request.user, fields=DESIGNATION_FIELDS, request=request)
            messages.success(request, _("Designation updated."))
            return redirect("hr:designation-list")
    else:
        form = DesignationForm(instance=designation)

    return render(request, "hr/designation_form.html", {"form": form, "designation": designation})


@role_required(*HR_ROLES)
@require_http_methods(["POST"])
def designation_delete(request, pk: int):
    designation = get_object_or_404(Designation, pk=pk)
    count = designation.employees.count()
    try:
        guarded_delete(
            designation,
            user=request.user,
            fields=DESIGNATION_FIELDS,
            action=AuditLog.Action.DELETED,
            checks=[(
                designation.employees.all(),
                _("Cannot delete designation. It is assigned to %(count)s employee(s).") % {"count": count},
            )],
            request=request,
        )
    except ProtectedRecordError as e:
        messages.error(request, str(e))
        return redirect("hr:designation-list")

    messages.success(request, _("Designation deleted."))
    return redirect("hr:designation-list")


@role_required(*HR_ROLES)
@require_http_methods(["POST"])
def designation_toggle_status(request, pk: int):
    designation = get_object_or_404(Designation, pk=pk)
    active = toggle_active(designation, user=request.user, request=request)
    messages.success(request, _("Designation activated.") if active else _("Designation deactivated."))
    return redirect("hr:designation-list")


@role_required(*HR_ROLES)
@require_http_methods(["GET"])
def designations_by_department(request):
    """JSON for dependent dropdowns: active designations of one department."""
    department_id = clean_param(request, "department_id")
    if not department_id.isdigit() or not Department.objects.filter(pk=int(department_id)).exists():
        return JsonResponse({"error": "Invalid department"}, status=422)

    designations = (
        Designation.objects
        .filter(department_id=int(department_id), is_active=True)
        .order_by("name")
        .values("id", "name")
    )
    return JsonResponse(list(designations), safe=False)

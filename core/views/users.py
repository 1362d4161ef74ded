import logging

from django.contrib import messages
from django.contrib.auth import get_user_model, update_session_auth_hash
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.translation import gettext as _
from django.views.decorators.http import require_http_methods

from core.exceptions import ProtectedRecordError, SelfActionError
from core.forms.user_forms import ResetPasswordForm, UserForm
from core.models import AuditLog, Role
from core.permissions import SETTINGS_ROLES, role_required
from core.services import users as user_service
from core.views.common import clean_param, filter_status

logger = logging.getLogger(__name__)

User = get_user_model()


@role_required(*SETTINGS_ROLES)
@require_http_methods(["GET"])
def user_list(request):
    search = clean_param(request, "search")
    role = clean_param(request, "role")
    status = clean_param(request, "status")

    qs = User.objects.select_related("profile").order_by("first_name", "email")
    if search:
        qs = qs.filter(
            Q(first_name__icontains=search) | Q(email__icontains=search) | Q(profile__phone__icontains=search)
        )
    if role in Role.values:
        qs = qs.filter(profile__role=role)
    qs = filter_status(qs, status)

    return render(request, "core/user_list.html", {
        "users": qs,
        "roles": Role.choices,
        "filters": {"search": search, "role": role, "status": status},
    })


@role_required(*SETTINGS_ROLES)
@require_http_methods(["GET", "POST"])
def user_create(request):
    if request.method == "POST":
        form = UserForm(request.POST)
        if form.is_valid():
            user = user_service.save_user(form, actor=request.user, request=request)
            messages.success(request, _("User created: %(email)s") % {"email": user.email})
            return redirect("core:user-list")
    else:
        form = UserForm()

    return render(request, "core/user_form.html", {"form": form, "target": None})


@role_required(*SETTINGS_ROLES)
@require_http_methods(["GET"])
def user_detail(request, pk: int):
    target = get_object_or_404(User.objects.select_related("profile"), pk=pk)
    activities = AuditLog.objects.filter(user=target).order_by("-created_at", "-id")[:20]
    return render(request, "core/user_detail.html", {"target": target, "activities": activities})


@role_required(*SETTINGS_ROLES)
@require_http_methods(["GET", "POST"])
def user_edit(request, pk: int):
    target = get_object_or_404(User, pk=pk)

    if request.method == "POST":
        form = UserForm(request.POST, instance=target)
        if form.is_valid():
            if target.pk == request.user.pk and not form.cleaned_data.get("is_active"):
                form.add_error("is_active", _("You cannot deactivate your own account."))
            else:
                user = user_service.save_user(form, actor=request.user, request=request)
                if user.pk == request.user.pk and form.cleaned_data.get("password"):
                    # keep the editing admin signed in after changing their own password
                    update_session_auth_hash(request, user)
                messages.success(request, _("User updated."))
                return redirect("core:user-detail", pk=target.pk)
    else:
        form = UserForm(instance=target)

    return render(request, "core/user_form.html", {"form": form, "target": target})


@role_required(*SETTINGS_ROLES)
@require_http_methods(["POST"])
def user_delete(request, pk: int):
    target = get_object_or_404(User, pk=pk)
    try:
        user_service.delete_user(target, actor=request.user, request=request)
    except (SelfActionError, ProtectedRecordError) as e:
        messages.error(request, str(e))
        return redirect("core:user-list")

    messages.success(request, _("User deleted."))
    return redirect("core:user-list")


@role_required(*SETTINGS_ROLES)
@require_http_methods(["POST"])
def user_toggle_status(request, pk: int):
    target = get_object_or_404(User, pk=pk)
    try:
        active = user_service.toggle_user_status(target, actor=request.user, request=request)
    except SelfActionError as e:
        messages.error(request, str(e))
        return redirect("core:user-list")

    messages.success(request, _("User activated.") if active else _("User deactivated."))
    return redirect("core:user-list")


@role_required(*SETTINGS_ROLES)
@require_http_methods(["GET", "POST"])
def user_reset_password(request, pk: int):
    target = get_object_or_404(User, pk=pk)

    if request.method == "POST":
        form = ResetPasswordForm(request.POST)
        if form.is_valid():
            user_service.reset_password(target, form.cleaned_data["password"], actor=request.user, request=request)
            if target.pk == request.user.pk:
                update_session_auth_hash(request, target)
            messages.success(request, _("Password has been reset."))
            return redirect("core:user-detail", pk=target.pk)
    else:
        form = ResetPasswordForm()

    return render(request, "core/user_reset_password.html", {"form": form, "target": target})

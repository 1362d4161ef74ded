from django.urls import path

from core.views import settings as settings_views
from core.views import users

app_name = "core"

urlpatterns = [
    path("users/", users.user_list, name="user-list"),
    path("users/new/", users.user_create, name="user-create"),
    path("users/<int:pk>/", users.user_detail, name="user-detail"),
    path("users/<int:pk>/edit/", users.user_edit, name="user-edit"),
    path("users/<int:pk>/delete/", users.user_delete, name="user-delete"),
    path("users/<int:pk>/toggle-status/", users.user_toggle_status, name="user-toggle-status"),
    path("users/<int:pk>/reset-password/", users.user_reset_password, name="user-reset-password"),

    path("settings/company/", settings_views.company_settings, name="company-settings"),

    path("settings/taxes/", settings_views.tax_list, name="tax-list"),
    path("settings/taxes/new/", settings_views.tax_create, name="tax-create"),
    path("settings/taxes/<int:pk>/edit/", settings_views.tax_edit, name="tax-edit"),
    path("settings/taxes/<int:pk>/delete/", settings_views.tax_delete, name="tax-delete"),
    path("settings/taxes/<int:pk>/toggle-status/", settings_views.tax_toggle_status, name="tax-toggle-status"),
]

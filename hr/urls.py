from django.urls import path
from . import views

app_name = "hr"

urlpatterns = [
    path("departments/", views.department_list, name="department-list"),
    path("departments/<int:pk>/edit/", views.department_edit, name="department-edit"),
    path("departments/<int:pk>/delete/", views.department_delete, name="department-delete"),
    path("departments/<int:pk>/toggle-status/", views.department_toggle_status, name="department-toggle-status"),

    path("designations/", views.designation_list, name="designation-list"),
    path("designations/by-department/", views.designations_by_department, name="designations-by-department"),
    path("designations/<int:pk>/edit/", views.designation_edit, name="designation-edit"),
    path("designations/<int:pk>/delete/", views.designation_delete, name="designation-delete"),
    path("designations/<int:pk>/toggle-status/", views.designation_toggle_status, name="designation-toggle-status"),
]

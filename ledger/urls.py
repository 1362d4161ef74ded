from django.urls import path
from . import views

app_name = "ledger"

urlpatterns = [
    path("account-categories/", views.category_list, name="category-list"),
    path("account-categories/<int:pk>/edit/", views.category_edit, name="category-edit"),
    path("account-categories/<int:pk>/delete/", views.category_delete, name="category-delete"),

    path("accounts/", views.account_list, name="account-list"),
    path("accounts/new/", views.account_create, name="account-create"),
    path("accounts/<int:pk>/", views.account_detail, name="account-detail"),
    path("accounts/<int:pk>/edit/", views.account_edit, name="account-edit"),
    path("accounts/<int:pk>/delete/", views.account_delete, name="account-delete"),
    path("accounts/<int:pk>/toggle-status/", views.account_toggle_status, name="account-toggle-status"),

    path("financial-years/", views.financial_year_list, name="financial-year-list"),
    path("financial-years/new/", views.financial_year_create, name="financial-year-create"),
    path("financial-years/<int:pk>/edit/", views.financial_year_edit, name="financial-year-edit"),
    path("financial-years/<int:pk>/activate/", views.financial_year_activate, name="financial-year-activate"),
    path("financial-years/<int:pk>/delete/", views.financial_year_delete, name="financial-year-delete"),

    path("journals/", views.journal_list, name="journal-list"),
    path("journals/new/", views.journal_create, name="journal-create"),
    path("journals/<int:pk>/", views.journal_detail, name="journal-detail"),
    path("journals/<int:pk>/edit/", views.journal_edit, name="journal-edit"),
    path("journals/<int:pk>/post/", views.journal_post, name="journal-post"),
    path("journals/<int:pk>/cancel/", views.journal_cancel, name="journal-cancel"),
    path("journals/<int:pk>/delete/", views.journal_delete, name="journal-delete"),
]

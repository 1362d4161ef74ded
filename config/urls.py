from django.contrib import admin
from django.urls import include, path

admin.autodiscover()

urlpatterns = [
    path("admin/", admin.site.urls),
    path("accounts/", include("django.contrib.auth.urls")),
    path("i18n/", include("django.conf.urls.i18n")),
    path("", include("masterdata.urls")),
    path("", include("core.urls")),
    path("", include("ledger.urls")),
    path("", include("inventory.urls")),
    path("hr/", include("hr.urls")),
]

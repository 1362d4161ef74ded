from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Role(models.TextChoices):
    ADMIN = "admin", _("Admin")
    ACCOUNTANT = "accountant", _("Accountant")
    MANAGER = "manager", _("Manager")
    USER = "user", _("User")


class UserProfile(models.Model):
    """Back-office attributes of a Django auth user.

    The auth user keeps the login data (email doubles as username, the
    display name lives in first_name, is_active is the account status).
    The profile adds what the application gates on: the role.
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")

    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER)
    phone = models.CharField(max_length=20, blank=True, default="")

    def __str__(self):
        return f"{self.user} ({self.get_role_display()})"

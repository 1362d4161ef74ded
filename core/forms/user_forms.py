from django import forms
from django.contrib.auth import get_user_model
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from core.models import Role

User = get_user_model()

PASSWORD_MIN_LENGTH = 8


class _PasswordPairMixin:
    """password + password_confirmation must match."""

    password_required = True

    def _clean_password_pair(self, cleaned):
        password = cleaned.get("password")
        confirmation = cleaned.get("password_confirmation")
        if password or self.password_required:
            if password != confirmation:
                self.add_error("password_confirmation", _("The password confirmation does not match."))
        return cleaned


class UserForm(_PasswordPairMixin, forms.ModelForm):
    """Create/update a back-office user.

    The user's email is also their username, and `name` is stored as first_name.
    The role and phone live on UserProfile.
    """

    name = forms.CharField(max_length=255, label=_("Name"))
    role = forms.ChoiceField(choices=Role.choices, label=_("Role"))
    phone = forms.CharField(max_length=20, required=False, label=_("Phone"))
    password = forms.CharField(widget=forms.PasswordInput, min_length=PASSWORD_MIN_LENGTH, required=False)
    password_confirmation = forms.CharField(widget=forms.PasswordInput, required=False)

    class Meta:
        model = User
        fields = ["email", "is_active"]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["email"].required = True
        self.password_required = self.instance.pk is None
        self.fields["password"].required = self.password_required
        self.fields["password_confirmation"].required = self.password_required

        if self.instance.pk:
            self.fields["name"].initial = self.instance.first_name
            profile = getattr(self.instance, "profile", None)
            if profile is not None:
                self.fields["role"].initial = profile.role
                self.fields["phone"].initial = profile.phone
        else:
            self.fields["is_active"].initial = True
            self.fields["role"].initial = Role.USER

    def clean_email(self):
        email = (self.cleaned_data.get("email") or "").strip().lower()
        clash = User.objects.filter(Q(email__iexact=email) | Q(username__iexact=email))
        if self.instance.pk:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise forms.ValidationError(_("A user with this email already exists."))
        return email

    def clean(self):
        cleaned = super().clean()
        return self._clean_password_pair(cleaned)

    def save(self, commit=True):
        user = super().save(commit=False)
        user.username = user.email
        user.first_name = self.cleaned_data["name"]
        if self.cleaned_data.get("password"):
            user.set_password(self.cleaned_data["password"])
        if commit:
            user.save()
        return user


class ResetPasswordForm(_PasswordPairMixin, forms.Form):
    password = forms.CharField(widget=forms.PasswordInput, min_length=PASSWORD_MIN_LENGTH)
    password_confirmation = forms.CharField(widget=forms.PasswordInput)

    def clean(self):
        cleaned = super().clean()
        return self._clean_password_pair(cleaned)

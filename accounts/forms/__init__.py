"""Account flow form exports."""

from accounts.forms.admin import UserAdminForm
from accounts.forms.auth import ForgotForm, LoginForm, RegisterForm, ResetPwdForm
from accounts.forms.base import Form, FormContext, validate_or_raise
from accounts.forms.binding import bind_form, build_form
from accounts.forms.profile import PasswordForm, ProfileForm
from accounts.forms.validation import FieldError, FormValidationError, Validation

__all__ = [
    "FieldError",
    "ForgotForm",
    "Form",
    "FormContext",
    "FormValidationError",
    "LoginForm",
    "PasswordForm",
    "ProfileForm",
    "RegisterForm",
    "ResetPwdForm",
    "UserAdminForm",
    "Validation",
    "bind_form",
    "build_form",
    "validate_or_raise",
]

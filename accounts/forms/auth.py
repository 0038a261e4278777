"""Registration, login and password recovery forms."""

from __future__ import annotations

from typing import ClassVar

from pydantic import PrivateAttr

from accounts.forms.base import Form, FormContext, passwords_match
from accounts.forms.validation import (
    AlphaDash,
    Email,
    FieldSpec,
    MaxSize,
    MinSize,
    Required,
    Validation,
)
from accounts.i18n import Translator
from accounts.models.user import User

USERNAME_RULES = (Required(), AlphaDash(), MinSize(5), MaxSize(30))
PASSWORD_SPEC = FieldSpec(rules=(Required(), MinSize(4), MaxSize(30)), widget="password")


class RegisterForm(Form):
    """Sign-up form."""

    field_specs: ClassVar[dict[str, FieldSpec]] = {
        "username": FieldSpec(rules=USERNAME_RULES),
        "email": FieldSpec(rules=(Required(), Email(), MaxSize(80))),
        "password": PASSWORD_SPEC,
        "password_re": PASSWORD_SPEC,
    }

    username: str = ""
    email: str = ""
    password: str = ""
    password_re: str = ""

    async def check(self, validation: Validation, ctx: FormContext) -> None:
        if not passwords_match(self, validation):
            return

        username_free, email_free = await ctx.user_service.can_register(
            db_session=ctx.db_session,
            username=self.username,
            email=self.email,
        )
        if not username_free:
            validation.set_error("username", "auth.username_already_taken")
        if not email_free:
            validation.set_error("email", "auth.email_already_taken")

    def labels(self) -> dict[str, str]:
        return {
            "username": "auth.login_username",
            "email": "auth.login_email",
            "password": "auth.login_password",
            "password_re": "auth.retype_password",
        }

    def helps(self, locale: Translator) -> dict[str, str]:
        return {
            "username": locale.tr("valid.min_length_is", 5)
            + ", "
            + locale.tr("valid.only_contains", "a-z 0-9 - _"),
        }

    def placeholders(self) -> dict[str, str]:
        return {
            "username": "auth.plz_enter_username",
            "email": "auth.plz_enter_email",
            "password": "auth.plz_enter_password",
            "password_re": "auth.plz_reenter_password",
        }


class LoginForm(Form):
    """Sign-in form accepting either a username or an email."""

    field_specs: ClassVar[dict[str, FieldSpec]] = {
        "username": FieldSpec(rules=(Required(),)),
        "password": FieldSpec(rules=(Required(),), widget="password"),
    }

    username: str = ""
    password: str = ""
    remember: bool = False

    def labels(self) -> dict[str, str]:
        return {
            "username": "auth.username_or_email",
            "password": "auth.login_password",
            "remember": "auth.login_remember_me",
        }


class ForgotForm(Form):
    """Asks for the email of the account whose password should be reset.

    A successful check leaves the matching account on :attr:`user` so the
    caller can send the reset mail without a second lookup.
    """

    field_specs: ClassVar[dict[str, FieldSpec]] = {
        "email": FieldSpec(rules=(Required(), Email(), MaxSize(80))),
    }

    email: str = ""

    _user: User | None = PrivateAttr(default=None)

    @property
    def user(self) -> User | None:
        return self._user

    async def check(self, validation: Validation, ctx: FormContext) -> None:
        self._user = await ctx.user_service.has_user(
            db_session=ctx.db_session,
            username_or_email=self.email,
        )
        if self._user is None:
            validation.set_error("email", "auth.forgotform_wrong_email")

    def labels(self) -> dict[str, str]:
        return {"email": "auth.login_email"}

    def helps(self, locale: Translator) -> dict[str, str]:
        return {"email": "auth.forgotform_email_help"}


class ResetPwdForm(Form):
    """New password form reached from a reset link."""

    field_specs: ClassVar[dict[str, FieldSpec]] = {
        "password": PASSWORD_SPEC,
        "password_re": PASSWORD_SPEC,
    }

    password: str = ""
    password_re: str = ""

    async def check(self, validation: Validation, ctx: FormContext) -> None:
        passwords_match(self, validation)

    def labels(self) -> dict[str, str]:
        return {"password_re": "auth.retype_password"}

    def placeholders(self) -> dict[str, str]:
        return {
            "password": "auth.plz_enter_password",
            "password_re": "auth.plz_reenter_password",
        }

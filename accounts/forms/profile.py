"""Account settings forms: profile details and password change."""

from __future__ import annotations

from typing import ClassVar

import structlog

from accounts.config import get_settings
from accounts.forms.base import (
    Form,
    FormContext,
    avatar_key,
    changed_fields,
    copy_fields,
    passwords_match,
)
from accounts.forms.validation import Email, FieldSpec, MaxSize, MinSize, Required, Validation
from accounts.i18n import Translator
from accounts.models.user import User

logger = structlog.get_logger(__name__)

PROFILE_FIELDS = (
    "nickname",
    "url",
    "info",
    "email",
    "public_email",
    "gr_email",
    "lang",
    "lang_adds",
)


def _lang_options() -> list[list[str]]:
    return [[lang, str(index)] for index, lang in enumerate(get_settings().i18n.langs)]


class ProfileForm(Form):
    """Self-service profile editor."""

    field_specs: ClassVar[dict[str, FieldSpec]] = {
        "nickname": FieldSpec(rules=(Required(), MaxSize(30))),
        "url": FieldSpec(rules=(MaxSize(100),)),
        "info": FieldSpec(rules=(MaxSize(255),), widget="textarea"),
        "email": FieldSpec(rules=(Required(), Email(), MaxSize(100))),
        "public_email": FieldSpec(widget="checkbox"),
        "gr_email": FieldSpec(rules=(Required(), MaxSize(80))),
        "lang": FieldSpec(rules=(Required(),), widget="select"),
        "lang_adds": FieldSpec(widget="select"),
    }

    nickname: str = ""
    url: str = ""
    info: str = ""
    email: str = ""
    public_email: bool = False
    gr_email: str = ""
    lang: int | None = None
    lang_adds: int = 0

    def lang_select_data(self) -> list[list[str]]:
        """Options for the primary language select."""
        return _lang_options()

    def lang_adds_select_data(self, locale: Translator) -> list[list[str]]:
        """Options for the additional language select, led by an "all" entry."""
        return [[locale.tr("all_language"), "-1"], *_lang_options()]

    def set_from_user(self, user: User) -> None:
        copy_fields(user, self, PROFILE_FIELDS)

    async def save_user_profile(self, ctx: FormContext, user: User) -> list[str]:
        """Persist the fields that differ from ``user`` and return their names.

        Changing the email deactivates the account until the new address is
        confirmed again.
        """
        self.gr_email = avatar_key(self.gr_email)

        changes = changed_fields(self, user, PROFILE_FIELDS)
        if not changes:
            return []

        if user.email != self.email:
            user.is_active = False
            changes.append("is_active")
            logger.info("user_reactivation_required", user_id=user.id)

        copy_fields(self, user, PROFILE_FIELDS)
        await ctx.user_service.update_user(db_session=ctx.db_session, user=user, fields=changes)
        logger.info("user_profile_updated", user_id=user.id, fields=changes)
        return changes

    def labels(self) -> dict[str, str]:
        return {
            "lang": "auth.profile_lang",
            "lang_adds": "auth.profile_lang_additional",
            "nickname": "model.user_nickname",
            "public_email": "auth.profile_publicemail",
            "gr_email": "auth.profile_gremail",
            "url": "auth.profile_url",
        }

    def helps(self, locale: Translator) -> dict[str, str]:
        return {
            "gr_email": "auth.profile_gremail_help",
            "info": locale.tr("Max-length is %d", 255),
        }

    def placeholders(self) -> dict[str, str]:
        return {
            "gr_email": "auth.plz_enter_gremail",
            "url": "auth.plz_enter_website",
            "info": "auth.plz_enter_your_info",
        }


class PasswordForm(Form):
    """Password change for the signed-in user carried on the form context."""

    field_specs: ClassVar[dict[str, FieldSpec]] = {
        "password_old": FieldSpec(rules=(Required(),), widget="password"),
        "password": FieldSpec(rules=(Required(), MinSize(4), MaxSize(30)), widget="password"),
        "password_re": FieldSpec(rules=(Required(), MinSize(4), MaxSize(30)), widget="password"),
    }

    password_old: str = ""
    password: str = ""
    password_re: str = ""

    async def check(self, validation: Validation, ctx: FormContext) -> None:
        if not passwords_match(self, validation):
            return

        password_hash = ctx.user.password_hash if ctx.user is not None else ""
        if not ctx.user_service.verify_password(
            password=self.password_old, password_hash=password_hash
        ):
            validation.set_error("password_old", "auth.old_password_wrong")

    def labels(self) -> dict[str, str]:
        return {
            "password_old": "auth.old_password",
            "password": "auth.new_password",
            "password_re": "auth.retype_password",
        }

    def placeholders(self) -> dict[str, str]:
        return {
            "password_old": "auth.plz_enter_old_password",
            "password": "auth.plz_enter_new_password",
            "password_re": "auth.plz_reenter_password",
        }

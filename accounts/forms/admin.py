"""Administrator user editor."""

from __future__ import annotations

from typing import ClassVar

from accounts.forms.auth import USERNAME_RULES
from accounts.forms.base import Form, FormContext, avatar_key, copy_fields
from accounts.forms.validation import Email, FieldSpec, MaxSize, Required, Validation
from accounts.i18n import Translator
from accounts.models.user import User

ADMIN_FIELDS = (
    "username",
    "email",
    "public_email",
    "nickname",
    "url",
    "info",
    "gr_email",
    "followers",
    "following",
    "is_admin",
    "is_active",
    "is_forbid",
)


class UserAdminForm(Form):
    """Create or edit any account; ``id`` is the record being edited, 0 when creating."""

    field_specs: ClassVar[dict[str, FieldSpec]] = {
        "username": FieldSpec(rules=USERNAME_RULES),
        "email": FieldSpec(rules=(Required(), Email(), MaxSize(100))),
        "public_email": FieldSpec(widget="checkbox"),
        "nickname": FieldSpec(rules=(Required(), MaxSize(30))),
        "url": FieldSpec(rules=(MaxSize(100),)),
        "info": FieldSpec(rules=(MaxSize(255),), widget="textarea"),
        "gr_email": FieldSpec(rules=(Required(), MaxSize(80))),
        "followers": FieldSpec(widget="number"),
        "following": FieldSpec(widget="number"),
        "is_admin": FieldSpec(widget="checkbox"),
        "is_active": FieldSpec(widget="checkbox"),
        "is_forbid": FieldSpec(widget="checkbox"),
    }
    unbound_fields: ClassVar[frozenset[str]] = frozenset({"create", "id"})

    create: bool = False
    id: int = 0
    username: str = ""
    email: str = ""
    public_email: bool = False
    nickname: str = ""
    url: str = ""
    info: str = ""
    gr_email: str = ""
    followers: int = 0
    following: int = 0
    is_admin: bool = False
    is_active: bool = False
    is_forbid: bool = False

    async def check(self, validation: Validation, ctx: FormContext) -> None:
        # The edited record itself is excluded so saving unchanged values passes.
        if await ctx.user_service.check_is_exist(
            db_session=ctx.db_session, field="username", value=self.username, exclude_id=self.id
        ):
            validation.set_error("username", "auth.username_already_taken")

        if await ctx.user_service.check_is_exist(
            db_session=ctx.db_session, field="email", value=self.email, exclude_id=self.id
        ):
            validation.set_error("email", "auth.email_already_taken")

    def labels(self) -> dict[str, str]:
        return {}

    def helps(self, locale: Translator) -> dict[str, str]:
        return {}

    def set_from_user(self, user: User) -> None:
        self.id = user.id
        copy_fields(user, self, ADMIN_FIELDS)

    def set_to_user(self, user: User) -> None:
        self.gr_email = avatar_key(self.gr_email)
        copy_fields(self, user, ADMIN_FIELDS)

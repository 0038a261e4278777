"""Base form record shared by the account flows."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from hashlib import md5
from typing import Any, ClassVar

import structlog
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.forms.validation import FieldSpec, FormValidationError, Validation
from accounts.i18n import Translator
from accounts.models.user import User
from accounts.services.user_service import UserService

logger = structlog.get_logger(__name__)


@dataclass
class FormContext:
    """Collaborators a form needs for cross-field checks and saving."""

    db_session: AsyncSession
    user_service: UserService
    user: User | None = None


def encode_md5(value: str) -> str:
    """Return the hex MD5 digest used as an avatar key."""
    return md5(value.encode("utf-8")).hexdigest()


def avatar_key(gr_email: str) -> str:
    """Hash avatar emails; values without ``@`` are assumed to be hashes already."""
    if "@" in gr_email:
        return encode_md5(gr_email)
    return gr_email


def copy_fields(source: Any, target: Any, fields: Iterable[str]) -> None:
    """Copy the named attributes from ``source`` onto ``target``."""
    for name in fields:
        setattr(target, name, getattr(source, name))


def changed_fields(source: Any, target: Any, fields: Iterable[str]) -> list[str]:
    """Return the named attributes whose values differ between two records."""
    return [name for name in fields if getattr(source, name) != getattr(target, name)]


class Form(BaseModel):
    """Per-request input record with a constraint table and display metadata."""

    model_config = ConfigDict(extra="ignore")

    field_specs: ClassVar[dict[str, FieldSpec]] = {}
    unbound_fields: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def manifest(cls) -> dict[str, dict[str, Any]]:
        """Describe each constrained field for the rendering layer."""
        return {
            name: {
                "required": spec.required,
                "widget": spec.widget,
                "rules": [rule.describe() for rule in spec.rules],
            }
            for name, spec in cls.field_specs.items()
        }

    def validate_fields(self) -> Validation:
        """Run the constraint table against the current values."""
        validation = Validation()
        validation.check_fields(self.field_specs, dict(self))
        return validation

    async def validate_form(self, ctx: FormContext) -> Validation:
        """Run field rules, then the cross-field check when they all pass."""
        validation = self.validate_fields()
        if not validation.has_errors:
            await self.check(validation, ctx)
        if validation.has_errors:
            logger.info(
                "form_validation_failed",
                form=type(self).__name__,
                fields=sorted(validation.error_map()),
            )
        return validation

    async def check(self, validation: Validation, ctx: FormContext) -> None:
        """Cross-field hook; forms without one accept any field-valid input."""

    def labels(self) -> dict[str, str]:
        return {}

    def helps(self, locale: Translator) -> dict[str, str]:
        return {}

    def placeholders(self) -> dict[str, str]:
        return {}


def passwords_match(form: Any, validation: Validation) -> bool:
    """Record a mismatch on ``password_re`` and report whether the pair agrees."""
    if form.password != form.password_re:
        validation.set_error("password_re", "auth.repassword_not_match")
        return False
    return True


async def validate_or_raise(form: Form, ctx: FormContext) -> Form:
    """Validate ``form`` and raise when any field error was collected."""
    validation = await form.validate_form(ctx)
    if validation.has_errors:
        raise FormValidationError(validation)
    return form

"""Field constraint descriptors and the collecting validation engine."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from email_validator import EmailNotValidError, validate_email

from accounts.i18n import Translator

_ALPHA_DASH_PATTERN = re.compile(r"^[\w-]+$", re.ASCII)


def _is_empty(value: Any) -> bool:
    """Return True for values a user left blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class Rule:
    """Base constraint descriptor evaluated against one field value."""

    name = "Rule"
    message = "valid.invalid_value"

    @property
    def args(self) -> tuple[Any, ...]:
        """Arguments interpolated into the rule's error message."""
        return ()

    def is_satisfied(self, value: Any) -> bool:
        """Return True when the value passes this rule."""
        raise NotImplementedError

    def describe(self) -> dict[str, Any]:
        """Return the manifest entry exposed to the rendering layer."""
        return {"name": self.name, "args": list(self.args)}


class Required(Rule):
    """Value must be present; strings must contain a non-space character.

    Integers count as present whatever their value, so ``0`` satisfies the
    rule; only ``None`` (an absent number) fails it.
    """

    name = "Required"
    message = "valid.required"

    def is_satisfied(self, value: Any) -> bool:
        return not _is_empty(value)


@dataclass(frozen=True)
class MinSize(Rule):
    """String length must be at least ``size`` characters."""

    size: int
    name = "MinSize"
    message = "valid.min_size"

    @property
    def args(self) -> tuple[Any, ...]:
        return (self.size,)

    def is_satisfied(self, value: Any) -> bool:
        return len(str(value)) >= self.size


@dataclass(frozen=True)
class MaxSize(Rule):
    """String length must be at most ``size`` characters."""

    size: int
    name = "MaxSize"
    message = "valid.max_size"

    @property
    def args(self) -> tuple[Any, ...]:
        return (self.size,)

    def is_satisfied(self, value: Any) -> bool:
        return len(str(value)) <= self.size


class Email(Rule):
    """Value must be a syntactically valid email address."""

    name = "Email"
    message = "valid.email"

    def is_satisfied(self, value: Any) -> bool:
        try:
            validate_email(str(value), check_deliverability=False)
        except EmailNotValidError:
            return False
        return True


class AlphaDash(Rule):
    """Value may only hold ASCII letters, digits, ``-`` and ``_``."""

    name = "AlphaDash"
    message = "valid.alpha_dash"

    def is_satisfied(self, value: Any) -> bool:
        return bool(_ALPHA_DASH_PATTERN.fullmatch(str(value)))


@dataclass(frozen=True)
class FieldSpec:
    """One row of a form's constraint table."""

    rules: tuple[Rule, ...] = ()
    widget: str = "text"

    @property
    def required(self) -> bool:
        return any(isinstance(rule, Required) for rule in self.rules)


@dataclass(frozen=True)
class FieldError:
    """Validation failure for one field with a localizable message identifier."""

    field: str
    message: str
    args: tuple[Any, ...] = ()

    def translate(self, translator: Translator) -> str:
        return translator.tr(self.message, *self.args)


@dataclass
class Validation:
    """Collects field errors so several failures surface together."""

    errors: list[FieldError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def set_error(self, field_name: str, message: str, *args: Any) -> FieldError:
        """Record an error for ``field_name`` and return it."""
        error = FieldError(field=field_name, message=message, args=args)
        self.errors.append(error)
        return error

    def error_map(self) -> dict[str, FieldError]:
        """Return the first recorded error per field."""
        result: dict[str, FieldError] = {}
        for error in self.errors:
            result.setdefault(error.field, error)
        return result

    def translate(self, translator: Translator) -> dict[str, str]:
        """Render the first error per field as display text."""
        return {name: error.translate(translator) for name, error in self.error_map().items()}

    def check_fields(self, specs: Mapping[str, FieldSpec], values: Mapping[str, Any]) -> None:
        """Evaluate every constraint table row, stopping at a field's first failed rule."""
        for field_name, spec in specs.items():
            value = values.get(field_name)
            if not spec.required and _is_empty(value):
                continue
            for rule in spec.rules:
                if not rule.is_satisfied(value):
                    self.set_error(field_name, rule.message, *rule.args)
                    break


class FormValidationError(Exception):
    """Raised when a bound or validated form carries field errors."""

    def __init__(self, validation: Validation) -> None:
        super().__init__("Form validation failed.")
        self.validation = validation

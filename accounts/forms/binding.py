"""Populate form records from incoming HTTP requests."""

from __future__ import annotations

import json
from typing import Any, TypeVar

import structlog
from fastapi import Request
from pydantic import ValidationError

from accounts.forms.base import Form
from accounts.forms.validation import FormValidationError, Validation

FormT = TypeVar("FormT", bound=Form)

logger = structlog.get_logger(__name__)


def _invalid_body() -> FormValidationError:
    validation = Validation()
    validation.set_error("__all__", "valid.invalid_value")
    return FormValidationError(validation)


async def _request_values(request: Request) -> dict[str, Any]:
    """Read a JSON object or url-encoded/multipart body into a plain mapping."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except json.JSONDecodeError as exc:
            logger.info("form_body_unreadable", path=request.url.path)
            raise _invalid_body() from exc
        if not isinstance(payload, dict):
            logger.info("form_body_unreadable", path=request.url.path)
            raise _invalid_body()
        return payload
    form_data = await request.form()
    return {key: value for key, value in form_data.items() if isinstance(value, str)}


def _drop_blank_non_text(form_cls: type[Form], values: dict[str, Any]) -> dict[str, Any]:
    """Leave blank inputs for non-string fields unset so defaults and Required apply."""
    data: dict[str, Any] = {}
    for key, value in values.items():
        if key in form_cls.unbound_fields:
            continue
        field_info = form_cls.model_fields.get(key)
        if value == "" and field_info is not None and field_info.annotation is not str:
            continue
        data[key] = value
    return data


def build_form(form_cls: type[FormT], values: dict[str, Any]) -> FormT:
    """Construct ``form_cls`` from raw values, collecting type coercion failures."""
    data = _drop_blank_non_text(form_cls, values)
    try:
        return form_cls.model_validate(data)
    except ValidationError as exc:
        validation = Validation()
        for error in exc.errors():
            location = error.get("loc") or ("__all__",)
            validation.set_error(str(location[0]), "valid.invalid_value")
        logger.info(
            "form_binding_failed",
            form=form_cls.__name__,
            fields=sorted(validation.error_map()),
        )
        raise FormValidationError(validation) from exc


async def bind_form(request: Request, form_cls: type[FormT]) -> FormT:
    """Build a form instance from the request body."""
    return build_form(form_cls, await _request_values(request))

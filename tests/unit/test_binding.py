"""Unit tests for building forms from raw request values."""

from __future__ import annotations

import pytest

from accounts.forms.admin import UserAdminForm
from accounts.forms.binding import build_form
from accounts.forms.profile import ProfileForm
from accounts.forms.validation import FormValidationError


def test_blank_number_inputs_fall_back_to_defaults() -> None:
    """Empty number boxes leave optional integer fields at zero."""
    form = build_form(
        UserAdminForm,
        {"username": "johndoe", "email": "john@example.com", "followers": "", "following": ""},
    )

    assert form.followers == 0
    assert form.following == 0
    assert "followers" not in form.validate_fields().error_map()


def test_blank_required_select_reports_required() -> None:
    """A blank language select is reported by its Required rule."""
    form = build_form(
        ProfileForm,
        {
            "nickname": "John",
            "email": "john@example.com",
            "gr_email": "abc",
            "lang": "",
            "lang_adds": "",
        },
    )

    assert form.lang is None
    errors = form.validate_fields().error_map()
    assert errors["lang"].message == "valid.required"
    assert "lang_adds" not in errors


def test_blank_text_inputs_are_kept() -> None:
    """Blank strings still reach text fields so Required can flag them."""
    form = build_form(ProfileForm, {"nickname": "", "lang": "0"})

    assert form.nickname == ""
    assert form.lang == 0
    assert form.validate_fields().error_map()["nickname"].message == "valid.required"


def test_non_numeric_input_is_an_invalid_value() -> None:
    """Unparseable numbers are still reported as invalid values."""
    with pytest.raises(FormValidationError) as exc_info:
        build_form(UserAdminForm, {"followers": "many"})

    assert exc_info.value.validation.error_map()["followers"].message == "valid.invalid_value"

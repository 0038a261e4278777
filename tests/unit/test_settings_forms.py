"""Unit tests for profile, password change and admin user forms."""

from __future__ import annotations

from hashlib import md5
from typing import Any

import pytest

from accounts.forms.admin import UserAdminForm
from accounts.forms.base import FormContext
from accounts.forms.profile import PasswordForm, ProfileForm
from accounts.i18n import get_locale
from accounts.models.user import User
from accounts.services.user_service import UserService


class _UserServiceStub(UserService):
    """UserService with persistence and uniqueness lookups replaced by recorders."""

    def __init__(self, taken: dict[str, int] | None = None, fail_update: bool = False) -> None:
        super().__init__()
        self.taken = taken or {}
        self.fail_update = fail_update
        self.updates: list[list[str]] = []
        self.exist_calls: list[dict[str, Any]] = []

    async def update_user(self, db_session: Any, user: User, fields: Any) -> None:
        """Record the persisted field names."""
        if self.fail_update:
            raise RuntimeError("db down")
        self.updates.append(list(fields))

    async def check_is_exist(
        self, db_session: Any, field: str, value: str, exclude_id: int = 0
    ) -> bool:
        """Report a collision when another id holds the value."""
        self.exist_calls.append({"field": field, "value": value, "exclude_id": exclude_id})
        holder = self.taken.get(value)
        return holder is not None and holder != exclude_id


def _context(service: UserService, user: User | None = None) -> FormContext:
    return FormContext(db_session=object(), user_service=service, user=user)  # type: ignore[arg-type]


def _build_user(**overrides: Any) -> User:
    """Create a stored user record for form tests."""
    values: dict[str, Any] = {
        "id": 7,
        "username": "johndoe",
        "nickname": "John",
        "password_hash": "",
        "url": "",
        "info": "",
        "email": "john@example.com",
        "public_email": False,
        "gr_email": md5(b"john@example.com").hexdigest(),
        "lang": 0,
        "lang_adds": -1,
        "followers": 2,
        "following": 3,
        "is_admin": False,
        "is_active": True,
        "is_forbid": False,
    }
    values.update(overrides)
    return User(**values)


def _profile_from(user: User) -> ProfileForm:
    form = ProfileForm()
    form.set_from_user(user)
    return form


@pytest.mark.asyncio
async def test_save_profile_without_changes_skips_persistence() -> None:
    """An unchanged profile makes no update call."""
    service = _UserServiceStub()
    user = _build_user()

    changes = await _profile_from(user).save_user_profile(_context(service), user)

    assert changes == []
    assert service.updates == []
    assert user.is_active is True


@pytest.mark.asyncio
async def test_save_profile_persists_only_changed_fields() -> None:
    """Only modified fields are written back."""
    service = _UserServiceStub()
    user = _build_user()
    form = _profile_from(user)
    form.nickname = "Johnny"
    form.url = "https://john.example.com"

    changes = await form.save_user_profile(_context(service), user)

    assert changes == ["nickname", "url"]
    assert service.updates == [["nickname", "url"]]
    assert user.nickname == "Johnny"
    assert user.is_active is True


@pytest.mark.asyncio
async def test_save_profile_email_change_deactivates_account() -> None:
    """Changing the email clears the active flag and persists it."""
    service = _UserServiceStub()
    user = _build_user()
    form = _profile_from(user)
    form.email = "new@example.com"

    changes = await form.save_user_profile(_context(service), user)

    assert changes == ["email", "is_active"]
    assert user.email == "new@example.com"
    assert user.is_active is False


@pytest.mark.asyncio
async def test_save_profile_hashes_avatar_email() -> None:
    """An avatar email is stored as its MD5 digest."""
    service = _UserServiceStub()
    user = _build_user()
    form = _profile_from(user)
    form.gr_email = "avatar@example.com"

    changes = await form.save_user_profile(_context(service), user)

    assert changes == ["gr_email"]
    assert user.gr_email == md5(b"avatar@example.com").hexdigest()


@pytest.mark.asyncio
async def test_save_profile_hashing_same_email_is_not_a_change() -> None:
    """Re-entering the email behind the stored hash leaves nothing to save."""
    service = _UserServiceStub()
    user = _build_user()
    form = _profile_from(user)
    form.gr_email = "john@example.com"

    changes = await form.save_user_profile(_context(service), user)

    assert changes == []
    assert service.updates == []


@pytest.mark.asyncio
async def test_save_profile_propagates_persistence_errors() -> None:
    """Update failures reach the caller unchanged."""
    service = _UserServiceStub(fail_update=True)
    user = _build_user()
    form = _profile_from(user)
    form.info = "Hello"

    with pytest.raises(RuntimeError, match="db down"):
        await form.save_user_profile(_context(service), user)


@pytest.mark.asyncio
async def test_profile_form_requires_language() -> None:
    """The primary language select is required; info is bounded."""
    form = ProfileForm(
        nickname="John",
        email="john@example.com",
        gr_email="abc",
        info="x" * 256,
    )

    validation = await form.validate_form(_context(_UserServiceStub()))

    errors = validation.error_map()
    assert errors["lang"].message == "valid.required"
    assert errors["info"].message == "valid.max_size"
    assert errors["info"].args == (255,)


def test_profile_form_select_data_and_metadata() -> None:
    """Language options follow configured languages; help text is interpolated."""
    form = ProfileForm()
    locale = get_locale("en-US")

    assert form.lang_select_data() == [["en-US", "0"], ["zh-CN", "1"]]
    assert form.lang_adds_select_data(locale) == [
        ["All languages", "-1"],
        ["en-US", "0"],
        ["zh-CN", "1"],
    ]
    assert form.helps(locale)["info"] == "Max-length is 255"
    assert form.labels()["nickname"] == "model.user_nickname"
    assert form.placeholders()["url"] == "auth.plz_enter_website"
    assert ProfileForm.manifest()["info"]["widget"] == "textarea"


@pytest.mark.asyncio
async def test_password_form_accepts_correct_old_password() -> None:
    """Matching confirmation and correct old password pass."""
    service = UserService()
    user = _build_user(password_hash=service.hash_password("old-secret"))
    form = PasswordForm(password_old="old-secret", password="abcd", password_re="abcd")

    validation = await form.validate_form(_context(service, user=user))

    assert validation.has_errors is False


@pytest.mark.asyncio
async def test_password_form_rejects_wrong_old_password() -> None:
    """A wrong old password is reported on password_old."""
    service = UserService()
    user = _build_user(password_hash=service.hash_password("old-secret"))
    form = PasswordForm(password_old="guess", password="abcd", password_re="abcd")

    validation = await form.validate_form(_context(service, user=user))

    assert [(e.field, e.message) for e in validation.errors] == [
        ("password_old", "auth.old_password_wrong")
    ]


@pytest.mark.asyncio
async def test_password_form_mismatch_reported_before_old_password() -> None:
    """A mismatched confirmation short-circuits old password verification."""
    service = UserService()
    user = _build_user(password_hash=service.hash_password("old-secret"))
    form = PasswordForm(password_old="guess", password="abcd", password_re="abce")

    validation = await form.validate_form(_context(service, user=user))

    assert [(e.field, e.message) for e in validation.errors] == [
        ("password_re", "auth.repassword_not_match")
    ]


def _admin_form(**overrides: Any) -> UserAdminForm:
    values: dict[str, Any] = {
        "id": 7,
        "username": "johndoe",
        "email": "john@example.com",
        "nickname": "John",
        "gr_email": "abc",
    }
    values.update(overrides)
    return UserAdminForm(**values)


@pytest.mark.asyncio
async def test_admin_form_ignores_the_edited_record() -> None:
    """Values held by the record being edited are not collisions."""
    service = _UserServiceStub(taken={"johndoe": 7, "john@example.com": 7})

    validation = await _admin_form().validate_form(_context(service))

    assert validation.has_errors is False
    assert [call["exclude_id"] for call in service.exist_calls] == [7, 7]


@pytest.mark.asyncio
async def test_admin_form_reports_values_held_by_other_records() -> None:
    """Username and email held by other ids are both reported."""
    service = _UserServiceStub(taken={"johndoe": 8, "john@example.com": 9})

    validation = await _admin_form().validate_form(_context(service))

    errors = validation.error_map()
    assert errors["username"].message == "auth.username_already_taken"
    assert errors["email"].message == "auth.email_already_taken"


def test_admin_form_copies_to_and_from_user() -> None:
    """Admin edits round through the user record with a hashed avatar email."""
    user = _build_user()
    form = UserAdminForm()
    form.set_from_user(user)

    assert form.id == 7
    assert form.followers == 2
    assert form.labels() == {}
    assert form.helps(get_locale()) == {}

    form.is_forbid = True
    form.gr_email = "other@example.com"
    form.set_to_user(user)

    assert user.is_forbid is True
    assert user.gr_email == md5(b"other@example.com").hexdigest()
    assert user.id == 7

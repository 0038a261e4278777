"""Message catalog lookup for form labels, help texts and validation errors."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from accounts.config import get_settings

logger = structlog.get_logger(__name__)

EN_US_MESSAGES: dict[str, str] = {
    "all_language": "All languages",
    "Max-length is %d": "Max-length is %d",
    "auth.login_username": "Username",
    "auth.login_email": "Email",
    "auth.login_password": "Password",
    "auth.login_remember_me": "Remember me",
    "auth.retype_password": "Retype password",
    "auth.username_or_email": "Username or email",
    "auth.plz_enter_username": "Please enter a username",
    "auth.plz_enter_email": "Please enter your email",
    "auth.plz_enter_password": "Please enter a password",
    "auth.plz_reenter_password": "Please enter the password again",
    "auth.plz_enter_old_password": "Please enter your current password",
    "auth.plz_enter_new_password": "Please enter a new password",
    "auth.plz_enter_gremail": "Gravatar email or hash",
    "auth.plz_enter_website": "Your website",
    "auth.plz_enter_your_info": "A few words about yourself",
    "auth.repassword_not_match": "The two passwords do not match",
    "auth.username_already_taken": "This username is already taken",
    "auth.email_already_taken": "This email is already registered",
    "auth.forgotform_email_help": "Enter the email you registered with",
    "auth.forgotform_wrong_email": "No account is registered with this email",
    "auth.old_password": "Current password",
    "auth.new_password": "New password",
    "auth.old_password_wrong": "Current password is not correct",
    "auth.profile_lang": "Language",
    "auth.profile_lang_additional": "Additional languages",
    "auth.profile_publicemail": "Show email on profile",
    "auth.profile_gremail": "Gravatar email",
    "auth.profile_gremail_help": "Only the MD5 hash of this email is stored",
    "auth.profile_url": "Website",
    "model.user_nickname": "Nickname",
    "valid.required": "Can not be empty",
    "valid.min_size": "Minimum size is %d",
    "valid.max_size": "Maximum size is %d",
    "valid.email": "Must be a valid email address",
    "valid.alpha_dash": "Must be valid alpha or numeric or dash(-_) characters",
    "valid.invalid_value": "Invalid value",
    "valid.min_length_is": "Minimum length is %d",
    "valid.only_contains": "Only contains %s",
}

CATALOGS: dict[str, Mapping[str, str]] = {"en-US": EN_US_MESSAGES}


class Translator(Protocol):
    """Contract for resolving message identifiers into display text."""

    def tr(self, key: str, *args: Any) -> str:
        """Return the message for ``key`` formatted with ``args``."""


@dataclass(frozen=True)
class Locale:
    """Catalog-backed translator for one language."""

    lang: str
    catalog: Mapping[str, str] = field(default_factory=dict)

    def tr(self, key: str, *args: Any) -> str:
        """Resolve a key; unknown keys are used as the format string itself."""
        message = self.catalog.get(key, key)
        if not args:
            return message
        try:
            return message % args
        except (TypeError, ValueError) as exc:
            logger.warning(
                "message_format_mismatch", lang=self.lang, key=key, args=args, error=str(exc)
            )
            return message


def get_locale(lang: str | None = None) -> Locale:
    """Return the locale for ``lang``, falling back to the configured default."""
    default_lang = get_settings().i18n.default_lang
    selected = lang if lang in CATALOGS else default_lang
    return Locale(lang=selected, catalog=CATALOGS.get(selected, EN_US_MESSAGES))


def negotiate_language(accept_language: str | None) -> str:
    """Pick the first configured language named by an Accept-Language header."""
    settings = get_settings()
    if accept_language:
        offered = {lang.lower(): lang for lang in settings.i18n.langs}
        for part in accept_language.split(","):
            tag = part.split(";")[0].strip().lower()
            if tag in offered:
                return offered[tag]
    return settings.i18n.default_lang

from __future__ import annotations

"""Input validation for profile, username, password and feedback forms.

Every check raises ``ValidationError`` naming the offending field; callers
validate before issuing any write.
"""

import re

from .errors import ValidationError
from .models import UserData

USERNAME_MIN = 3
PASSWORD_MIN = 6
PHONE_RE = re.compile(r"^\d{10}$")
EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")
_USERNAME_STRIP_RE = re.compile(r"[^a-zA-Z0-9_]")


def validate_email(email: str) -> str:
    email = email.strip()
    if not EMAIL_RE.search(email):
        raise ValidationError("email", "Please enter a valid email address.")
    return email


def validate_profile(user: UserData) -> UserData:
    for field, value in (
        ("name", user.name),
        ("class", user.class_name),
        ("state", user.state),
        ("city", user.city),
    ):
        if not value.strip():
            raise ValidationError(field, "Please fill in all required fields.")
    if not PHONE_RE.match(user.phone):
        raise ValidationError("phone", "Please enter a valid 10-digit phone number.")
    validate_email(user.email)
    return user


def sanitize_username(raw: str) -> str:
    return _USERNAME_STRIP_RE.sub("", raw).lower()


def validate_username(username: str) -> str:
    username = username.strip()
    if len(username) < USERNAME_MIN:
        raise ValidationError("username", f"Username must be at least {USERNAME_MIN} characters long.")
    if not USERNAME_RE.match(username):
        raise ValidationError("username", "Username can only contain letters, numbers and underscores.")
    return username


def validate_password(new_password: str, confirm: str) -> str:
    if not new_password:
        raise ValidationError("password", "Please enter a new password.")
    if len(new_password) < PASSWORD_MIN:
        raise ValidationError("password", f"Password must be at least {PASSWORD_MIN} characters long.")
    if new_password != confirm:
        raise ValidationError("confirm_password", "Passwords do not match.")
    return new_password


def validate_feedback(text: str, rating: int) -> tuple[str, int]:
    if not text.strip():
        raise ValidationError("feedback", "Please write some feedback.")
    if not 1 <= rating <= 5:
        raise ValidationError("rating", "Please choose a rating from 1 to 5.")
    return text.strip(), rating


__all__ = [
    "validate_email",
    "validate_profile",
    "sanitize_username",
    "validate_username",
    "validate_password",
    "validate_feedback",
]

"""Field validation for request bodies; each validator returns 'field: message' strings."""

import re

from app.core.errors import ValidationFailedError
from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.user import UpdateUserRequest

NAME_MIN_LEN, NAME_MAX_LEN = 4, 40
USERNAME_MIN_LEN, USERNAME_MAX_LEN = 3, 50
PASSWORD_MIN_LEN, PASSWORD_MAX_LEN = 6, 20
EMAIL_MAX_LEN = 100

EMAIL_PATTERN = re.compile(
    r"^[_A-Za-z0-9+-]+(\.[_A-Za-z0-9-]+)*@[A-Za-z0-9-]+(\.[A-Za-z0-9]+)*(\.[A-Za-z]{2,})$"
)


def _not_blank(field: str, value: str | None, errors: list[str]) -> bool:
    if value is None or not value.strip():
        errors.append(f"{field}: must not be blank")
        return False
    return True


def _size(field: str, value: str | None, low: int, high: int, errors: list[str]) -> None:
    if value is not None and not (low <= len(value) <= high):
        errors.append(f"{field}: size must be between {low} and {high}")


def validate_login(body: LoginRequest) -> list[str]:
    errors: list[str] = []
    if _not_blank("username", body.username, errors):
        _size("username", body.username, USERNAME_MIN_LEN, USERNAME_MAX_LEN, errors)
    if _not_blank("password", body.password, errors):
        _size("password", body.password, PASSWORD_MIN_LEN, PASSWORD_MAX_LEN, errors)
    return errors


def validate_register(body: RegisterRequest) -> list[str]:
    errors: list[str] = []
    if _not_blank("name", body.name, errors):
        _size("name", body.name, NAME_MIN_LEN, NAME_MAX_LEN, errors)
    if _not_blank("username", body.username, errors):
        _size("username", body.username, USERNAME_MIN_LEN, USERNAME_MAX_LEN, errors)
    if _not_blank("email", body.email, errors):
        _size("email", body.email, 0, EMAIL_MAX_LEN, errors)
        if not EMAIL_PATTERN.match(body.email):
            errors.append("email: Invalid email")
    if _not_blank("password", body.password, errors):
        _size("password", body.password, PASSWORD_MIN_LEN, PASSWORD_MAX_LEN, errors)
    return errors


def validate_update_user(body: UpdateUserRequest) -> list[str]:
    """Optional fields are only size-checked when present and non-empty."""
    errors: list[str] = []
    if body.name:
        _size("name", body.name, NAME_MIN_LEN, NAME_MAX_LEN, errors)
    if body.password:
        _size("password", body.password, PASSWORD_MIN_LEN, PASSWORD_MAX_LEN, errors)
    if body.password_confirmation:
        _size(
            "password_confirmation",
            body.password_confirmation,
            PASSWORD_MIN_LEN,
            PASSWORD_MAX_LEN,
            errors,
        )
    return errors


def ensure_valid(errors: list[str]) -> None:
    """Raise ValidationFailedError carrying every violation, if there are any."""
    if errors:
        raise ValidationFailedError(*errors)

"""Synchronous input checks for profile and debate forms."""

from hottake.errors import ValidationError
from hottake.models import GENDERS

MIN_AGE = 0
MAX_AGE = 150
DEFAULT_TITLE_MAX_LEN = 25


def validate_name(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("name", "Name is required")
    return value.strip()


def validate_age(value: object) -> int | None:
    """Return the age as an int, or None when left blank.

    Accepts ints and numeric strings in [0, 150]. Booleans, fractional
    numbers and anything non-numeric are rejected.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError("age", "Age must be a whole number")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            age = int(text)
        except ValueError as exc:
            raise ValidationError("age", f"Age must be a whole number, got {value!r}") from exc
    elif isinstance(value, int):
        age = value
    elif isinstance(value, float) and value.is_integer():
        age = int(value)
    else:
        raise ValidationError("age", f"Age must be a whole number, got {value!r}")

    if not MIN_AGE <= age <= MAX_AGE:
        raise ValidationError("age", f"Age must be between {MIN_AGE} and {MAX_AGE}")
    return age


def validate_gender(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        normalized = value.strip().lower()
        if not normalized:
            return None
        if normalized in GENDERS:
            return normalized
    raise ValidationError("gender", f"Gender must be one of: {', '.join(GENDERS)}")


def validate_title(value: object, max_len: int = DEFAULT_TITLE_MAX_LEN) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("title", "Title is required")
    title = value.strip()
    if len(title) > max_len:
        raise ValidationError("title", f"Title must be at most {max_len} characters")
    return title

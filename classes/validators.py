import re

from models.enums import ProgressStatus
from utils.errors import ValidationError
from utils.helpers import is_number

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
MIN_PASSWORD_LENGTH = 8


def require_fields(data, *fields, message=None):
    missing = [field for field in fields if data.get(field) in (None, "")]
    if missing:
        raise ValidationError(message or "Missing required fields", details={"missing": missing})


def validate_length(field_name, value, max_length):
    if len(value) > max_length:
        raise ValidationError(f"{field_name} must be {max_length} characters or fewer.")


def validate_email(email):
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")
    validate_length("Email", email, 255)
    return email.strip().lower()


def validate_password(password):
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    validate_length("Password", password, 128)


def validate_slug(slug):
    if not isinstance(slug, str) or not SLUG_PATTERN.match(slug):
        raise ValidationError("Invalid module slug")
    validate_length("Module slug", slug, 100)
    return slug


def validate_status(status):
    try:
        return ProgressStatus(status)
    except (TypeError, ValueError):
        allowed = ", ".join(s.value for s in ProgressStatus)
        raise ValidationError(f"Status must be one of: {allowed}")


def validate_score(score):
    if not is_number(score) or not 0 <= score <= 100:
        raise ValidationError("Score must be a number between 0 and 100")
    return float(score)


def validate_non_negative(field_name, value):
    if not is_number(value) or value < 0:
        raise ValidationError(f"{field_name} must be a non-negative number")
    return value


def validate_boolean(field_name, value):
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value


def validate_non_negative_int(field_name, value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field_name} must be a non-negative integer")
    return value

import re
from dataclasses import dataclass
from typing import Any

from ..exceptions.contact import (
    InvalidEmailFormatError,
    LengthOutOfRangeError,
    MissingFieldError,
    SuspiciousContentError,
    WrongTypeError,
)
from ..logger import get_logger


logger = get_logger(__name__)

FIELDS = ("name", "email", "message")

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_MIN_LENGTH, NAME_MAX_LENGTH = 2, 100
EMAIL_MAX_LENGTH = 255
MESSAGE_MIN_LENGTH, MESSAGE_MAX_LENGTH = 10, 4000

SUSPICIOUS_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
]


@dataclass(frozen=True)
class Submission:
    name: str
    email: str
    message: str


def strip_tags(value: str) -> str:
    return value.replace("<", "").replace(">", "").strip()


def _check_length(field: str, value: str, minimum: int | None, maximum: int) -> None:
    label = field.capitalize()
    if len(value) > maximum:
        raise LengthOutOfRangeError(field, f"{label} must be less than {maximum} characters")
    if minimum is not None and len(value) < minimum:
        raise LengthOutOfRangeError(field, f"{label} must be at least {minimum} characters long")


def validate_submission(raw: Any) -> Submission:
    """
    Validate and sanitize a raw contact form payload.

    Lengths of name and message are checked after trimming, the email length before. Angle brackets are removed
    from name and message and the email is lower-cased. Payloads matching a script or handler injection pattern
    are rejected instead of sanitized.
    """

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise WrongTypeError

    if missing := [field for field in FIELDS if raw.get(field) is None or raw.get(field) == ""]:
        raise MissingFieldError(missing)

    name, email, message = (raw[field] for field in FIELDS)
    if not all(isinstance(value, str) for value in (name, email, message)):
        raise WrongTypeError

    if not EMAIL_REGEX.match(email):
        raise InvalidEmailFormatError

    _check_length("name", name.strip(), NAME_MIN_LENGTH, NAME_MAX_LENGTH)
    _check_length("email", email, None, EMAIL_MAX_LENGTH)
    _check_length("message", message.strip(), MESSAGE_MIN_LENGTH, MESSAGE_MAX_LENGTH)

    submission = Submission(name=strip_tags(name), email=email.strip().lower(), message=strip_tags(message))

    all_text = f"{submission.name} {submission.email} {submission.message}"
    if any(pattern.search(all_text) for pattern in SUSPICIOUS_PATTERNS):
        raise SuspiciousContentError

    logger.info("Contact form validation passed", email=submission.email, message=submission.message)
    return submission

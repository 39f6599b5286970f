from typing import Any

import pytest

from contact_api.exceptions.contact import (
    InvalidEmailFormatError,
    LengthOutOfRangeError,
    MissingFieldError,
    SuspiciousContentError,
    WrongTypeError,
)
from contact_api.utils.validation import Submission, validate_submission


VALID = {"name": "Alex", "email": "alex@example.com", "message": "Hello there, nice portfolio!"}


@pytest.mark.parametrize(
    "raw,expected",
    [
        (VALID, Submission("Alex", "alex@example.com", "Hello there, nice portfolio!")),
        (
            {"name": "  <b>Alex</b>  ", "email": "Alex@Example.COM", "message": "  a > b and b < c, right?  "},
            Submission("bAlex/b", "alex@example.com", "a  b and b  c, right?"),
        ),
        ({"name": "Al", "email": "a@b.co", "message": "0123456789"}, Submission("Al", "a@b.co", "0123456789")),
        (
            {"name": "x" * 100, "email": "x@y.com", "message": "m" * 4000},
            Submission("x" * 100, "x@y.com", "m" * 4000),
        ),
        (
            {"name": "Alex", "email": "alex@example.com", "message": "Hello there!", "extra": 42},
            Submission("Alex", "alex@example.com", "Hello there!"),
        ),
    ],
)
def test__validate_submission__valid(raw: dict[str, Any], expected: Submission) -> None:
    assert validate_submission(raw) == expected


@pytest.mark.parametrize(
    "raw,missing",
    [
        ({"email": "alex@example.com", "message": "Hello there!"}, ["name"]),
        ({"name": "Alex", "email": "", "message": "Hello there!"}, ["email"]),
        ({"name": "Alex", "email": "alex@example.com", "message": None}, ["message"]),
        ({"name": "", "message": "Hello there!"}, ["name", "email"]),
        ({}, ["name", "email", "message"]),
        (None, ["name", "email", "message"]),
    ],
)
def test__validate_submission__missing_field(raw: dict[str, Any] | None, missing: list[str]) -> None:
    with pytest.raises(MissingFieldError) as exc_info:
        validate_submission(raw)

    assert exc_info.value.missing == missing
    assert exc_info.value.extra == {"missing": {field: field in missing for field in ("name", "email", "message")}}
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize(
    "raw",
    [
        {"name": 42, "email": "alex@example.com", "message": "Hello there!"},
        {"name": "Alex", "email": ["alex@example.com"], "message": "Hello there!"},
        {"name": "Alex", "email": "alex@example.com", "message": {"text": "Hello there!"}},
        ["Alex", "alex@example.com", "Hello there!"],
        "name=Alex",
    ],
)
def test__validate_submission__wrong_type(raw: Any) -> None:
    with pytest.raises(WrongTypeError):
        validate_submission(raw)


@pytest.mark.parametrize(
    "email", ["not-an-email", "alex@example", "alex example@test.com", "@example.com", "alex@@example.com", "a@b."]
)
def test__validate_submission__invalid_email(email: str) -> None:
    with pytest.raises(InvalidEmailFormatError):
        validate_submission({**VALID, "email": email})


def test__validate_submission__email_without_at_sign() -> None:
    with pytest.raises(InvalidEmailFormatError):
        validate_submission({"name": "Alex", "email": "not-an-email", "message": "hello there!"})


@pytest.mark.parametrize(
    "raw,field",
    [
        ({"name": "a", "email": "x@y.com", "message": "0123456789"}, "name"),
        ({"name": "   a   ", "email": "x@y.com", "message": "0123456789"}, "name"),
        ({"name": "x" * 101, "email": "x@y.com", "message": "0123456789"}, "name"),
        ({"name": "Alex", "email": "x@" + "y" * 250 + ".com", "message": "0123456789"}, "email"),
        ({"name": "Alex", "email": "x@y.com", "message": "too short"}, "message"),
        ({"name": "Alex", "email": "x@y.com", "message": "   short     "}, "message"),
        ({"name": "Alex", "email": "x@y.com", "message": "m" * 4001}, "message"),
    ],
)
def test__validate_submission__length_out_of_range(raw: dict[str, Any], field: str) -> None:
    with pytest.raises(LengthOutOfRangeError) as exc_info:
        validate_submission(raw)

    assert exc_info.value.field == field
    assert field.capitalize() in exc_info.value.detail


@pytest.mark.parametrize(
    "message",
    [
        "click javascript:alert(1) please",
        "look at this: onerror = steal()",
        "an ONCLICK=boom() attribute",
        "open data:text/html;base64,AAAA now",
    ],
)
def test__validate_submission__suspicious_content(message: str) -> None:
    with pytest.raises(SuspiciousContentError):
        validate_submission({**VALID, "message": message})


def test__validate_submission__suspicious_content_in_email() -> None:
    with pytest.raises(SuspiciousContentError):
        validate_submission({"name": "Alex", "email": "onload=x@evil.com", "message": "Hello there!"})


def test__validate_submission__script_tags_are_neutralized() -> None:
    submission = validate_submission({**VALID, "message": "<script>alert(1)</script> hello"})

    assert submission.message == "scriptalert(1)/script hello"


def test__validate_submission__logs_redacted_email(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO", logger="contact_api.utils.validation")

    validate_submission(VALID)

    record = caplog.records[-1]
    assert record.fields == {"email": "ale***", "message": len(VALID["message"])}
    assert "alex@example.com" not in record.getMessage()
    assert VALID["message"] not in record.getMessage()

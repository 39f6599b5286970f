from typing import Any

import pytest

from contact_api.logger import get_logger, length_only, mask_prefix, redact


@pytest.mark.parametrize(
    "fields,expected",
    [
        ({"email": "jane@example.com"}, {"email": "jan***"}),
        ({"name": "Jane Doe", "message": "Hello there!"}, {"name": "Jan***", "message": 12}),
        ({"id": 42, "email": None}, {"id": 42, "email": None}),
        ({"ip": "1.2.3.4", "email": "ab"}, {"ip": "1.2.3.4", "email": "ab***"}),
    ],
)
def test__redact(fields: dict[str, Any], expected: dict[str, Any]) -> None:
    assert redact(fields) == expected


def test__redact__custom_policy() -> None:
    assert redact({"token": "secret", "email": "jane@example.com"}, {"token": length_only}) == {
        "token": 6,
        "email": "jane@example.com",
    }


def test__mask_prefix() -> None:
    assert mask_prefix(123456) == "123***"


def test__field_logger(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO", logger="tests.field_logger")
    logger = get_logger("tests.field_logger")

    logger.info("Contact message saved", id=7, email="jane@example.com", message="Hello there!")
    logger.warning("No fields")

    saved, plain = caplog.records[-2:]
    assert saved.getMessage() == "Contact message saved id=7 email='jan***' message=12"
    assert saved.fields == {"id": 7, "email": "jan***", "message": 12}
    assert plain.getMessage() == "No fields"
    assert plain.fields == {}


def test__field_logger__exc_info(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO", logger="tests.field_logger")
    logger = get_logger("tests.field_logger")

    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception("Failed", email="jane@example.com")

    record = caplog.records[-1]
    assert record.exc_info is not None
    assert record.getMessage() == "Failed email='jan***'"

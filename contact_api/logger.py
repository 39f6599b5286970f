import logging
import sys
from collections.abc import Callable, MutableMapping
from typing import Any

from .settings import settings


Redactor = Callable[[Any], Any]

_RESERVED_KWARGS = {"exc_info", "stack_info", "stacklevel", "extra"}


def mask_prefix(value: Any) -> str:
    """Keep the first three characters of a value and mask the rest."""

    return f"{str(value)[:3]}***"


def length_only(value: Any) -> int:
    return len(str(value))


REDACTION_POLICY: dict[str, Redactor] = {
    "email": mask_prefix,
    "name": mask_prefix,
    "message": length_only,
}


def redact(fields: dict[str, Any], policy: dict[str, Redactor] = REDACTION_POLICY) -> dict[str, Any]:
    return {key: value if value is None or key not in policy else policy[key](value) for key, value in fields.items()}


class FieldLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """
    Logger accepting structured keyword fields.

    Fields are redacted through a single policy table, appended to the message as `key=value` pairs and attached to
    the log record as `record.fields`:

        logger.info("Contact message saved", id=42, email="jane@example.com")
        # Contact message saved id=42 email='jan***'
    """

    def __init__(self, logger: logging.Logger, policy: dict[str, Redactor] = REDACTION_POLICY) -> None:
        super().__init__(logger, {})
        self.policy = policy

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        fields = redact({k: kwargs.pop(k) for k in list(kwargs) if k not in _RESERVED_KWARGS}, self.policy)
        kwargs["extra"] = {**kwargs.get("extra", {}), "fields": fields}
        if fields:
            msg = f"{msg} " + " ".join(f"{key}={value!r}" for key, value in fields.items())
        return msg, kwargs


logging_formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")
logging_handler = logging.StreamHandler(sys.stdout)
logging_handler.setFormatter(logging_formatter)


def setup_sql_logging() -> None:
    logger = logging.getLogger("sqlalchemy.engine")
    logger.setLevel(logging.INFO)
    logger.addHandler(logging_handler)


def get_logger(name: str) -> FieldLogger:
    logger: logging.Logger = logging.getLogger(name)
    logger.setLevel(settings.log_level)
    if logging_handler not in logger.handlers:
        logger.addHandler(logging_handler)
    return FieldLogger(logger)

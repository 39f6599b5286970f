import asyncio
from dataclasses import dataclass
from datetime import datetime

from .emailjs import EmailJSNotifier, NotificationOutcome
from .messages import InsertedMessage, MessageStore
from ..database import ConnectivityError, QueryError
from ..exceptions.api_exception import APIException
from ..exceptions.contact import DatabaseQueryError, DatabaseUnavailableError, SaveMessageError
from ..logger import get_logger
from ..utils.validation import Submission


logger = get_logger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    id: int
    created_at: datetime
    notification: NotificationOutcome

    @property
    def email_sent(self) -> bool:
        return self.notification.sent


def classify_store_failure(error: BaseException) -> APIException:
    if isinstance(error, ConnectivityError):
        return DatabaseUnavailableError()
    if isinstance(error, QueryError):
        return DatabaseQueryError()
    return SaveMessageError()


class SubmissionOrchestrator:
    """
    Stores a validated submission and relays it by email at the same time.

    The insert and the notification are awaited together and neither cancels the other. The submission fails
    only if the insert fails; the notification outcome is reported but never changes the result.
    """

    def __init__(self, messages: MessageStore, notifier: EmailJSNotifier) -> None:
        self.messages = messages
        self.notifier = notifier

    async def _notify(self, submission: Submission) -> NotificationOutcome:
        try:
            return await self.notifier.send_notification(submission)
        except Exception as e:
            logger.exception("Notification gateway raised instead of returning an outcome")
            return NotificationOutcome.failed(repr(e))

    async def submit(self, submission: Submission) -> SubmissionResult:
        logger.info("Contact form submission started", name=submission.name, email=submission.email)

        stored, notification = await asyncio.gather(
            self.messages.insert_message(submission), self._notify(submission), return_exceptions=True
        )
        if isinstance(notification, BaseException):
            notification = NotificationOutcome.failed(repr(notification))

        logger.info(
            "Operation results",
            database_success=isinstance(stored, InsertedMessage),
            email_status=notification.status.value,
        )

        if not isinstance(stored, InsertedMessage):
            logger.error(
                "Contact submission failed",
                error=type(stored).__name__,
                cause=repr(stored.__cause__) if stored.__cause__ else None,
                email=submission.email,
            )
            raise classify_store_failure(stored) from stored

        logger.info(
            "Contact message saved to database",
            id=stored.id,
            name=submission.name,
            email=submission.email,
            message=submission.message,
            timestamp=stored.created_at.isoformat(),
        )
        return SubmissionResult(id=stored.id, created_at=stored.created_at, notification=notification)

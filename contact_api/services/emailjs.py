from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import aiohttp

from ..logger import get_logger
from ..settings import Settings
from ..utils.validation import Submission


logger = get_logger(__name__)


class NotificationStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class NotificationOutcome:
    status: NotificationStatus
    provider_status: int | None = None
    text: str | None = None
    error: str | None = None

    @property
    def sent(self) -> bool:
        return self.status == NotificationStatus.SENT

    @staticmethod
    def skipped(reason: str) -> NotificationOutcome:
        return NotificationOutcome(NotificationStatus.SKIPPED, text=reason)

    @staticmethod
    def failed(error: str, provider_status: int | None = None, text: str | None = None) -> NotificationOutcome:
        return NotificationOutcome(NotificationStatus.FAILED, provider_status=provider_status, text=text, error=error)

    @property
    def serialize(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "providerStatus": self.provider_status,
            "text": self.text,
            "error": self.error,
        }


class EmailJSNotifier:
    """Relays contact messages through the EmailJS REST API."""

    def __init__(self, settings: Settings) -> None:
        self.service_id = settings.emailjs_service_id
        self.template_id = settings.emailjs_template_id
        self.public_key = settings.emailjs_public_key
        self.private_key = settings.emailjs_private_key
        self.api_url = settings.emailjs_api_url
        self.recipient = settings.contact_recipient
        self.timeout = aiohttp.ClientTimeout(total=settings.emailjs_timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def configured(self) -> bool:
        return bool(self.service_id and self.template_id and self.public_key and self.private_key)

    def build_payload(self, submission: Submission) -> dict[str, Any]:
        return {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.public_key,
            "accessToken": self.private_key,
            "template_params": {
                "user_name": submission.name,
                "user_email": submission.email,
                "message": submission.message,
                "to_email": self.recipient,
                "reply_to": submission.email,
                "subject": f"New Contact Form Message from {submission.name}",
            },
        }

    async def _post(self, payload: dict[str, Any]) -> tuple[int, str]:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)

        async with self._session.post(self.api_url, json=payload) as resp:
            return resp.status, await resp.text()

    async def send_notification(self, submission: Submission) -> NotificationOutcome:
        if not self.configured:
            logger.info("Email sending skipped - configuration incomplete")
            return NotificationOutcome.skipped("EmailJS not configured")

        logger.info("Sending email via EmailJS", service_id=self.service_id, template_id=self.template_id)
        try:
            status, text = await self._post(self.build_payload(submission))
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.error("EmailJS request failed", error=repr(e))
            return NotificationOutcome.failed(repr(e))
        except Exception as e:
            logger.exception("Unexpected error while sending email via EmailJS")
            return NotificationOutcome.failed(repr(e))

        if status != 200:
            logger.error("EmailJS rejected the email", status=status, text=text)
            return NotificationOutcome.failed("EmailJS rejected the email", provider_status=status, text=text)

        logger.info("Email sent successfully via EmailJS", status=status, text=text)
        return NotificationOutcome(NotificationStatus.SENT, provider_status=status, text=text)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

"""Endpoints for the contact form"""

import math
import re
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, status

from ..context import AppContext, get_context
from ..database import StoreError
from ..exceptions.contact import (
    ContactRateLimitExceededError,
    DatabaseQueryError,
    DatabaseUnavailableError,
    InvalidEmailFormatError,
    LengthOutOfRangeError,
    MissingFieldError,
    RetrieveMessagesError,
    RetrieveStatsError,
    SaveMessageError,
    SuspiciousContentError,
    WrongTypeError,
)
from ..logger import get_logger
from ..schemas.contact import ContactForm, MessagesResponse, StatsResponse, SubmitResponse, TestResponse
from ..utils.docs import get_example, responses
from ..utils.utc import utcnow
from ..utils.validation import validate_submission


router = APIRouter(tags=["contact"])

logger = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def _parse_positive_int(value: str | None, default: int) -> int:
    """Read the leading integer of `value`, so `"2abc"` and `"2.9"` both give 2."""

    match = LEADING_INTEGER.match(value) if value is not None else None
    if match is None:
        return default
    number = int(match.group(1))
    return number if number >= 1 else default


def parse_page_params(page: str | None, limit: str | None, max_limit: int | None = None) -> tuple[int, int, int]:
    """Return page, limit and offset. Missing, non-numeric or non-positive values fall back to the defaults."""

    page_ = _parse_positive_int(page, DEFAULT_PAGE)
    limit_ = _parse_positive_int(limit, DEFAULT_LIMIT)
    if max_limit is not None:
        limit_ = min(limit_, max_limit)
    return page_, limit_, (page_ - 1) * limit_


@router.post(
    "/contact",
    status_code=status.HTTP_201_CREATED,
    responses=responses(
        SubmitResponse,
        MissingFieldError,
        WrongTypeError,
        InvalidEmailFormatError,
        LengthOutOfRangeError,
        SuspiciousContentError,
        ContactRateLimitExceededError,
        DatabaseQueryError,
        SaveMessageError,
        DatabaseUnavailableError,
        status_code=status.HTTP_201_CREATED,
    ),
)
async def submit_contact_form(
    request: Request,
    data: Any = Body(None, examples=[get_example(ContactForm)]),
    context: AppContext = Depends(get_context),
) -> Any:
    """
    Submit a message through the contact form.

    The message is stored and relayed to the site owner by email at the same time. A failed or skipped email does
    not fail the request, it is reported through `emailSent`.

    The form can be sent as JSON or as `application/x-www-form-urlencoded`.

    Limited to 5 successful submissions per client address within 15 minutes.
    """

    if request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPE):
        data = dict(await request.form())

    submission = validate_submission(data)
    result = await context.orchestrator.submit(submission)

    response: dict[str, Any] = {
        "success": True,
        "message": "Contact message sent successfully",
        "id": result.id,
        "timestamp": result.created_at,
        "emailSent": result.email_sent,
        "emailConfigured": context.notifier.configured,
    }
    if context.settings.debug:
        response["debug"] = result.notification.serialize
    return response


@router.get("/contact/messages", responses=responses(MessagesResponse, RetrieveMessagesError))
async def get_contact_messages(
    page: str | None = Query(None, description="Page number, starting at 1 (default 1)"),
    limit: str | None = Query(None, description="Maximum number of messages per page (default 20)"),
    context: AppContext = Depends(get_context),
) -> Any:
    """
    Return the stored messages, newest first.

    Note: this endpoint is not protected by any authentication.
    """

    page_, limit_, offset = parse_page_params(page, limit, context.settings.max_page_limit)

    try:
        total = await context.messages.count_messages()
        messages = await context.messages.list_messages(limit_, offset)
    except StoreError as e:
        logger.error("Database error retrieving contact messages", error=repr(e), cause=repr(e.__cause__))
        raise RetrieveMessagesError from e

    logger.info("Retrieved contact messages", count=len(messages), page=page_)

    return {
        "success": True,
        "messages": [message.serialize for message in messages],
        "pagination": {"page": page_, "limit": limit_, "total": total, "pages": math.ceil(total / limit_)},
    }


@router.get("/contact/stats", responses=responses(StatsResponse, RetrieveStatsError))
async def get_contact_stats(context: AppContext = Depends(get_context)) -> Any:
    """Return the number of messages in total, within the last 7 and 30 days and the time of the latest message."""

    try:
        stats = await context.messages.aggregate_stats()
    except StoreError as e:
        logger.error("Database error retrieving contact stats", error=repr(e), cause=repr(e.__cause__))
        raise RetrieveStatsError from e

    return {"success": True, "stats": stats.serialize}


@router.get("/contact/test", responses=responses(TestResponse))
@router.get("/test", responses=responses(TestResponse), include_in_schema=False)
async def test(context: AppContext = Depends(get_context)) -> Any:
    """Check that the API is reachable."""

    return {
        "success": True,
        "message": "API is working correctly",
        "timestamp": utcnow(),
        "environment": context.settings.environment,
    }

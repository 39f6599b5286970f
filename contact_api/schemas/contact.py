from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ..utils.docs import example, get_example


class ContactForm(BaseModel):
    name: str = Field(description="Name of the sender (2-100 characters)")
    email: str = Field(description="Email address of the sender")
    message: str = Field(description="Content of the message (10-4000 characters)")

    model_config = example(
        name="Jane Doe", email="jane@example.com", message="Hi, I would like to talk about a project."
    )


class SubmitResponse(BaseModel):
    success: bool = Field(description="Whether the message has been stored")
    message: str = Field(description="Human readable result")
    id: int = Field(description="Unique identifier of the stored message")
    timestamp: datetime = Field(description="Creation time assigned by the database")
    emailSent: bool = Field(description="Whether the notification email has been accepted by the email provider")
    emailConfigured: bool = Field(description="Whether the email provider is configured")
    debug: dict[str, Any] | None = Field(None, description="Notification details (debug mode only)")

    model_config = example(
        success=True,
        message="Contact message sent successfully",
        id=42,
        timestamp="2024-05-01T12:34:56+00:00",
        emailSent=True,
        emailConfigured=True,
    )


class StoredMessage(BaseModel):
    id: int = Field(description="Unique identifier of the message")
    name: str = Field(description="Name of the sender")
    email: str = Field(description="Email address of the sender")
    message: str = Field(description="Content of the message")
    createdAt: datetime = Field(description="Creation time of the message")

    model_config = example(
        id=42,
        name="Jane Doe",
        email="jane@example.com",
        message="Hi, I would like to talk about a project.",
        createdAt="2024-05-01T12:34:56+00:00",
    )


class Pagination(BaseModel):
    page: int = Field(description="Current page (starting at 1)")
    limit: int = Field(description="Maximum number of messages per page")
    total: int = Field(description="Total number of messages")
    pages: int = Field(description="Total number of pages")

    model_config = example(page=1, limit=20, total=1, pages=1)


class MessagesResponse(BaseModel):
    success: bool
    messages: list[StoredMessage] = Field(description="Messages of the requested page, newest first")
    pagination: Pagination

    model_config = example(success=True, messages=[get_example(StoredMessage)], pagination=get_example(Pagination))


class Stats(BaseModel):
    totalMessages: int = Field(description="Total number of messages")
    lastWeek: int = Field(description="Number of messages received in the last 7 days")
    lastMonth: int = Field(description="Number of messages received in the last 30 days")
    lastMessage: datetime | None = Field(description="Creation time of the most recent message")

    model_config = example(totalMessages=12, lastWeek=2, lastMonth=5, lastMessage="2024-05-01T12:34:56+00:00")


class StatsResponse(BaseModel):
    success: bool
    stats: Stats

    model_config = example(success=True, stats=get_example(Stats))


class TestResponse(BaseModel):
    success: bool
    message: str
    timestamp: datetime
    environment: str

    model_config = example(
        success=True,
        message="API is working correctly",
        timestamp="2024-05-01T12:34:56+00:00",
        environment="production",
    )


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str

    model_config = example(status="OK", timestamp="2024-05-01T12:34:56+00:00", version="1.0.0")

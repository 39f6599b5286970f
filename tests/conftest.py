from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import timedelta
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from contact_api.app import app
from contact_api.context import AppContext
from contact_api.database import DB
from contact_api.models import ContactMessage
from contact_api.services.messages import MessageStore
from contact_api.settings import Settings
from contact_api.utils.utc import utcnow
from contact_api.utils.validation import Submission


AddMessages = Callable[..., Awaitable[None]]


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'contact.db'}",
        emailjs_service_id=None,
        emailjs_template_id=None,
        emailjs_public_key=None,
        emailjs_private_key=None,
        contact_recipient="owner@example.com",
        debug=False,
        sentry_dsn=None,
    )


@pytest.fixture
async def db(test_settings: Settings) -> AsyncIterator[DB]:
    db = DB(test_settings.database_url)
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def store(db: DB) -> MessageStore:
    return MessageStore(db)


@pytest.fixture
def submission() -> Submission:
    return Submission(name="Jane Doe", email="jane@example.com", message="Hello, I would like to talk about a project.")


@pytest.fixture
async def context(test_settings: Settings) -> AsyncIterator[AppContext]:
    context = AppContext.from_settings(test_settings)
    await context.startup()
    yield context
    await context.shutdown()


@pytest.fixture
async def client(context: AppContext) -> AsyncIterator[AsyncClient]:
    app.state.context = context
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    del app.state.context


@pytest.fixture
def add_messages() -> AddMessages:
    """Insert one message per given age. Sender i is the i-th age old."""

    async def add(db: DB, *ages: timedelta) -> None:
        now = utcnow()

        async def _add(session: AsyncSession) -> None:
            session.add_all(
                ContactMessage(
                    name=f"Sender {i}", email=f"sender{i}@example.com", message="Hello there!", created_at=now - age
                )
                for i, age in enumerate(ages, start=1)
            )

        await db.run(_add)

    return add

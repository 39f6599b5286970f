from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import Insert, case, desc, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import DB, days_ago
from ..models import ContactMessage
from ..utils.validation import Submission


@dataclass(frozen=True)
class InsertedMessage:
    id: int
    created_at: datetime


@dataclass(frozen=True)
class StatsSnapshot:
    total_messages: int
    last_week: int
    last_month: int
    last_message: datetime | None

    @property
    def serialize(self) -> dict[str, Any]:
        return {
            "totalMessages": self.total_messages,
            "lastWeek": self.last_week,
            "lastMonth": self.last_month,
            "lastMessage": self.last_message,
        }


def insert_statement(submission: Submission, returning: bool) -> Insert:
    statement = insert(ContactMessage).values(name=submission.name, email=submission.email, message=submission.message)
    return statement.returning(ContactMessage.id, ContactMessage.created_at) if returning else statement


class MessageStore:
    """Reads and writes contact messages. All methods raise `StoreError` subclasses on failure."""

    def __init__(self, db: DB) -> None:
        self.db = db

    async def insert_message(self, submission: Submission) -> InsertedMessage:
        """Store a submission and return the id and creation time assigned by the database."""

        returning = self.db.engine.dialect.insert_returning

        async def _insert(session: AsyncSession) -> InsertedMessage:
            result = await session.execute(insert_statement(submission, returning))
            if returning:
                row = result.one()
                return InsertedMessage(id=row.id, created_at=row.created_at)

            # MySQL has no INSERT ... RETURNING
            [id_] = result.inserted_primary_key
            created_at = (
                await session.execute(select(ContactMessage.created_at).where(ContactMessage.id == id_))
            ).scalar_one()
            return InsertedMessage(id=id_, created_at=created_at)

        return await self.db.run(_insert)

    async def count_messages(self) -> int:
        async def _count(session: AsyncSession) -> int:
            return (await session.execute(select(func.count()).select_from(ContactMessage))).scalar_one()

        return await self.db.run(_count)

    async def list_messages(self, limit: int, offset: int) -> list[ContactMessage]:
        async def _list(session: AsyncSession) -> list[ContactMessage]:
            query = (
                select(ContactMessage)
                .order_by(desc(ContactMessage.created_at), desc(ContactMessage.id))
                .offset(offset)
                .limit(limit)
            )
            return list((await session.execute(query)).scalars())

        return await self.db.run(_list)

    async def aggregate_stats(self) -> StatsSnapshot:
        async def _stats(session: AsyncSession) -> StatsSnapshot:
            query = select(
                func.count().label("total_messages"),
                func.count(case((ContactMessage.created_at >= days_ago(7), 1))).label("last_week"),
                func.count(case((ContactMessage.created_at >= days_ago(30), 1))).label("last_month"),
                func.max(ContactMessage.created_at).label("last_message"),
            ).select_from(ContactMessage)
            row = (await session.execute(query)).one()
            return StatsSnapshot(
                total_messages=row.total_messages,
                last_week=row.last_week,
                last_month=row.last_month,
                last_message=row.last_message,
            )

        return await self.db.run(_stats)

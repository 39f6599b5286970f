from __future__ import annotations

from dataclasses import dataclass

from starlette.requests import Request

from .database import DB
from .logger import get_logger
from .services.emailjs import EmailJSNotifier
from .services.messages import MessageStore
from .services.submission import SubmissionOrchestrator
from .settings import Settings
from .utils.rate_limit import RateLimiter


logger = get_logger(__name__)


@dataclass
class AppContext:
    """
    Process-wide state shared by all requests.

    `startup` must complete before the server accepts traffic and `shutdown` runs once when the process receives a
    shutdown signal.
    """

    settings: Settings
    db: DB
    messages: MessageStore
    notifier: EmailJSNotifier
    orchestrator: SubmissionOrchestrator
    general_limiter: RateLimiter
    contact_limiter: RateLimiter

    @staticmethod
    def from_settings(settings: Settings) -> AppContext:
        db = DB(
            settings.database_url,
            pool_size=settings.pool_size,
            pool_recycle=settings.pool_recycle,
            pool_timeout=settings.pool_timeout,
            query_timeout=settings.query_timeout,
            echo=settings.sql_show_statements,
        )
        messages = MessageStore(db)
        notifier = EmailJSNotifier(settings)
        return AppContext(
            settings=settings,
            db=db,
            messages=messages,
            notifier=notifier,
            orchestrator=SubmissionOrchestrator(messages, notifier),
            general_limiter=RateLimiter(settings.general_rate_limit, settings.rate_limit_window),
            contact_limiter=RateLimiter(settings.contact_rate_limit, settings.rate_limit_window),
        )

    async def startup(self) -> None:
        await self.db.connect()
        if self.settings.create_tables:
            await self.db.create_tables()
        if self.notifier.configured:
            logger.info("EmailJS initialized successfully")
        else:
            logger.warning("EmailJS not initialized - missing environment variables")

    async def shutdown(self) -> None:
        try:
            await self.notifier.close()
        finally:
            await self.db.close()


def get_context(request: Request) -> AppContext:
    context: AppContext = request.app.state.context
    return context

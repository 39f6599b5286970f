import uvicorn

from .logger import get_logger
from .settings import settings


logger = get_logger(__name__)


def main() -> None:
    logger.info("Server starting", host=settings.host, port=settings.port, environment=settings.environment)
    uvicorn.run(
        "contact_api.app:app",
        host=settings.host,
        port=settings.port,
        root_path=settings.root_path,
        reload=settings.reload,
        forwarded_allow_ips="*",
        timeout_graceful_shutdown=30,
    )

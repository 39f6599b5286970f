"""Liveness endpoint"""

from typing import Any

from fastapi import APIRouter

from .. import __version__
from ..schemas.contact import HealthResponse
from ..utils.docs import responses
from ..utils.utc import utcnow


router = APIRouter(tags=["health"])


@router.get("/health", responses=responses(HealthResponse))
async def health() -> Any:
    """Return OK as long as the process is serving requests."""

    return {"status": "OK", "timestamp": utcnow(), "version": __version__}

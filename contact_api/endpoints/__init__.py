from fastapi import APIRouter

from . import contact, health


ROUTERS: dict[str, tuple[APIRouter, str | None, str]] = {
    contact.router.tags[0]: (contact.router, contact.__doc__, "/api"),
    health.router.tags[0]: (health.router, health.__doc__, ""),
}

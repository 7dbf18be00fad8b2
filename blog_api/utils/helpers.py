from datetime import datetime

from fastapi import Request
from starlette.routing import Match


def host(request: Request) -> str:
    """Client address of ``request``, or ``"unknown"`` behind some proxies."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Local wall-clock time, second precision."""
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def get_summary(request: Request) -> str | None:
    """OpenAPI summary (or name) of the route that fully matches ``request``."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match is Match.FULL:
            return getattr(route, "summary", None) or getattr(route, "name", None)
    return None

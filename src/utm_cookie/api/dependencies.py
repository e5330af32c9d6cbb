"""FastAPI dependencies for UTM attribution."""
from fastapi import Request

from ..tracking.cookie import UtmCookie
from .middleware import STATE_ATTR


def get_utm_cookie(request: Request) -> UtmCookie:
    """Return the engine bound to the current request.

    Raises:
        RuntimeError: If UtmCookieMiddleware is not installed
    """
    engine = getattr(request.state, STATE_ATTR, None)
    if engine is None:
        raise RuntimeError("UtmCookieMiddleware is not installed on this application")
    return engine

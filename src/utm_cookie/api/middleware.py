"""ASGI middleware binding a UTM cookie engine to every HTTP request.

Usage:
    from utm_cookie.api import get_utm_cookie, install_utm_cookie
    from utm_cookie.config import load_settings

    app = FastAPI()
    install_utm_cookie(app, load_settings())

    @app.get("/landing")
    async def landing(utm: UtmCookie = Depends(get_utm_cookie)):
        return utm.get()
"""
import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from ..config import UtmCookieSettings, configure_utm_cookie
from ..schemas.cookie import CookieInstruction
from ..tracking.cookie import UtmCookie


logger = logging.getLogger(__name__)

STATE_ATTR = "utm_cookie"


def build_utm_cookie(
    request: Request,
    settings: UtmCookieSettings,
    sanitizer: Optional[Callable[[str], str]] = None,
) -> UtmCookie:
    """Create a configured engine for one request."""
    engine = UtmCookie(
        cookies=request.cookies,
        query_params=request.query_params,
        sanitizer=sanitizer,
    )
    return configure_utm_cookie(engine, settings)


def apply_cookie_instructions(
    response: Response, instructions: list[CookieInstruction]
) -> None:
    """Translate queued cookie instructions into Set-Cookie headers."""
    for instruction in instructions:
        response.set_cookie(
            key=instruction.name,
            value=instruction.value,
            expires=instruction.expires,
            path=instruction.path,
            domain=instruction.domain,
            secure=instruction.secure,
            httponly=instruction.httponly,
            samesite=None,
        )


class UtmCookieMiddleware(BaseHTTPMiddleware):
    """Per-request UTM cookie lifecycle.

    Builds a fresh engine per request (cached records never leak between
    requests), initializes it when auto_init is enabled and flushes queued
    cookie writes onto the response.
    """

    def __init__(
        self,
        app: ASGIApp,
        settings: Optional[UtmCookieSettings] = None,
        sanitizer: Optional[Callable[[str], str]] = None,
    ):
        super().__init__(app)
        self.settings = settings or UtmCookieSettings()
        self.sanitizer = sanitizer

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        engine = build_utm_cookie(request, self.settings, self.sanitizer)
        setattr(request.state, STATE_ATTR, engine)

        if self.settings.auto_init:
            engine.init()

        response = await call_next(request)

        if engine.pending_cookies:
            logger.debug(
                "Applying %s UTM cookie instruction(s) for %s",
                len(engine.pending_cookies),
                request.url.path,
            )
            apply_cookie_instructions(response, engine.pending_cookies)

        return response


def install_utm_cookie(
    app: FastAPI,
    settings: UtmCookieSettings,
    sanitizer: Optional[Callable[[str], str]] = None,
) -> None:
    """Register the UTM cookie middleware on an application.

    Raises:
        InvalidConfiguration: If the engine rejects a setting (e.g. lifetime 0)
    """
    configure_utm_cookie(UtmCookie(), settings)
    app.add_middleware(UtmCookieMiddleware, settings=settings, sanitizer=sanitizer)
    logger.info(
        "UTM cookie middleware installed: name=%s, auto_init=%s, overwrite=%s",
        settings.name,
        settings.auto_init,
        settings.overwrite,
    )

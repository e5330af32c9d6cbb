"""UTM cookie FastAPI application entry point."""
import logging
from typing import Optional

from fastapi import FastAPI

from .api.middleware import install_utm_cookie
from .api.routes import router as api_router
from .config import UtmCookieSettings, load_settings


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app(settings: Optional[UtmCookieSettings] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: UTM cookie settings (loaded from environment if None)
    """
    app = FastAPI(
        title="UTM Cookie API",
        version="0.1.0",
        description="Campaign attribution persisted in a browser cookie",
    )

    install_utm_cookie(app, settings or load_settings())
    app.include_router(api_router)

    return app


app = create_app()

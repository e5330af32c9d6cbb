"""UTM cookie HTTP layer: middleware, dependency and routes."""
from .dependencies import get_utm_cookie
from .middleware import UtmCookieMiddleware, install_utm_cookie
from .routes import router

__all__ = ["UtmCookieMiddleware", "get_utm_cookie", "install_utm_cookie", "router"]

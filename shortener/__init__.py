"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .service import URLShortenerService
from .identity import IdentityService
from .security import TokenService
from .handlers import LinkHandlers, HandlerRequest, HandlerResult

__all__ = [
    "ShortCodeGenerator",
    "URLShortenerService",
    "IdentityService",
    "TokenService",
    "LinkHandlers",
    "HandlerRequest",
    "HandlerResult",
]

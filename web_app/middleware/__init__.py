"""Middleware for URL shortener web app."""

from .auth import AuthenticationMiddleware
from .logging import LoggingMiddleware

__all__ = ["AuthenticationMiddleware", "LoggingMiddleware"]

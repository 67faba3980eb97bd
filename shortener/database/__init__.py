"""Database layer for URL shortener."""

from .base import ShortenerDBBase
from .memory import InMemoryShortenerDB
from .postgres import PostgresShortenerDB
from .models import ShortLink, User

__all__ = ["ShortenerDBBase", "InMemoryShortenerDB", "PostgresShortenerDB", "ShortLink", "User"]

"""Common utilities for URL shortener."""

from .validators import is_valid_url, is_valid_short_code, is_valid_email
from .headers import (
    parse_authorization_header,
    extract_forwarded_headers,
    build_base_url,
    build_short_url,
)
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "is_valid_email",
    "parse_authorization_header",
    "extract_forwarded_headers",
    "build_base_url",
    "build_short_url",
    "setup_logging",
    "get_logger",
]

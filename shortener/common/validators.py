"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse
from typing import Tuple

# Path segments the router owns; a code equal to one of these would be shadowed.
RESERVED_CODES = {
    "api", "health", "admin", "static", "assets", "favicon",
    "robots", "sitemap", "shorten", "allcodes", "users", "docs",
}

SHORT_CODE_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')
EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > 2048:
        return False, "URL is too long (max 2048 characters)"

    try:
        result = urlparse(url)

        if result.scheme not in ["http", "https"]:
            return False, "URL must use http or https protocol"

        if not result.netloc:
            return False, "URL must have a valid domain"

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def is_valid_short_code(short_code: str, min_length: int = 4, max_length: int = 20) -> Tuple[bool, str]:
    """Validate a caller-supplied short code.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    if not SHORT_CODE_PATTERN.match(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"

    if short_code.lower() in RESERVED_CODES:
        return False, f"'{short_code}' is a reserved word and cannot be used"

    return True, ""


def is_valid_email(email: str) -> Tuple[bool, str]:
    """Validate an email address (shape only)."""
    if not email or not isinstance(email, str):
        return False, "Email is required"

    if len(email) > 255:
        return False, "Email is too long (max 255 characters)"

    if not EMAIL_PATTERN.match(email):
        return False, "Invalid email address"

    return True, ""

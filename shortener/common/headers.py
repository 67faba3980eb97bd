"""Header parsing utilities for URL shortener."""

from typing import Dict, Optional

from ..errors import ValidationError

BEARER_PREFIX = "Bearer"


def parse_authorization_header(value: Optional[str]) -> Optional[str]:
    """Extract the bearer token from an Authorization header value.

    Args:
        value: Raw header value, or None when the header is absent

    Returns:
        The token, or None for an anonymous request (no header)

    Raises:
        ValidationError: If the header is present but not ``Bearer <token>``
    """
    if value is None:
        return None

    scheme, _, token = value.strip().partition(" ")
    if scheme != BEARER_PREFIX:
        raise ValidationError("Token must start with Bearer")

    token = token.strip()
    if not token:
        raise ValidationError("Bearer token is empty")

    return token


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers dictionary

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    headers_lower = {k.lower(): v for k, v in headers.items()}

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
    }


def build_base_url(
    headers: Dict[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build base URL from headers or fallback.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host
    2. Request scheme + host
    3. Fallback base URL from config

    Returns:
        Base URL (e.g., https://example.com)
    """
    forwarded = extract_forwarded_headers(headers)

    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        return f"{forwarded['forwarded_proto']}://{forwarded['forwarded_host']}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Join base URL, optional path prefix (e.g. /s) and short code."""
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"

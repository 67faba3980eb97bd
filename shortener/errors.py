"""
Error classes for the URL shortener.

Every error carries the HTTP status it maps to, so the web layer can render
any of them without knowing which component raised it.
"""

from typing import Optional, Dict, Any


class ShortenerError(Exception):
    """
    Base shortener error class.

    Attributes:
        status_code: HTTP status code (default: 500)
        message: Error message (default: "Internal server error")
        details: Optional additional error details
    """
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize shortener error.

        Args:
            message: Error message (overrides default)
            details: Optional additional error details
        """
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ShortenerError):
    """400 Malformed or missing input."""
    status_code = 400
    message = "Validation error"


class AuthenticationFailure(ShortenerError):
    """401 Missing or invalid credential."""
    status_code = 401
    message = "Authentication required"


class NotFoundError(ShortenerError):
    """404 Unknown code or id, including records owned by someone else."""
    status_code = 404
    message = "Not found"


class ConflictError(ShortenerError):
    """409 Unique key already taken."""
    status_code = 409
    message = "Already exists"

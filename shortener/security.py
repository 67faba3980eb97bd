"""Password hashing and bearer tokens."""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from jwt.exceptions import InvalidTokenError, ExpiredSignatureError

from .errors import AuthenticationFailure

SALT_BYTES = 256


def hash_password(password: str, salt: Optional[str] = None) -> Tuple[str, str]:
    """
    Derive a password hash as hex(HMAC-SHA256(key=salt, msg=password)).

    Args:
        password: Plaintext password
        salt: Existing salt to reuse (login); a fresh one is drawn when None (signup)

    Returns:
        Tuple of (salt, password_hash), both hex strings
    """
    if salt is None:
        salt = secrets.token_hex(SALT_BYTES)
    digest = hmac.new(salt.encode("utf-8"), password.encode("utf-8"), hashlib.sha256).hexdigest()
    return salt, digest


def verify_password(password: str, salt: str, password_hash: str) -> bool:
    """
    Verify a password against a stored salt and hash.

    Returns:
        True if the password matches, False otherwise
    """
    _, candidate = hash_password(password, salt)
    return hmac.compare_digest(candidate, password_hash)


class TokenService:
    """Issue and validate JWT bearer tokens carrying a user id."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl_minutes: int = 0,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            secret: Signing key
            algorithm: JWT algorithm
            ttl_minutes: Token lifetime; 0 issues tokens without an exp claim
            logger: Optional logger
        """
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.ttl_minutes = ttl_minutes
        self.logger = logger or logging.getLogger(__name__)

    def sign(self, user_id: str) -> str:
        payload = {"id": user_id}
        if self.ttl_minutes > 0:
            payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=self.ttl_minutes)
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Validate a token and return the user id it carries.

        Raises:
            AuthenticationFailure: If the token is expired, tampered with or lacks an id
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            self.logger.info("Rejected expired token")
            raise AuthenticationFailure("Token has expired")
        except InvalidTokenError as e:
            self.logger.info(f"Rejected invalid token: {e}")
            raise AuthenticationFailure("Invalid token")

        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise AuthenticationFailure("Invalid token")
        return user_id

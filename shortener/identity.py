"""Signup, login and caller resolution."""

import logging
import uuid
from typing import Optional

from .database.base import ShortenerDBBase
from .database.models import User
from .errors import AuthenticationFailure
from .security import TokenService, hash_password, verify_password


class IdentityService:
    """Service layer for users and their bearer tokens."""

    def __init__(
        self,
        db: ShortenerDBBase,
        tokens: TokenService,
        logger: Optional[logging.Logger] = None,
    ):
        self.db = db
        self.tokens = tokens
        self.logger = logger or logging.getLogger(__name__)

    async def signup(
        self,
        firstname: str,
        email: str,
        password: str,
        lastname: Optional[str] = None,
    ) -> User:
        """Register a new user.

        Returns:
            The created user

        Raises:
            ConflictError: If the email is already registered
        """
        salt, password_hash = hash_password(password)
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            firstname=firstname,
            lastname=lastname,
            password_hash=password_hash,
            salt=salt,
        )
        user = await self.db.insert_user(user)
        self.logger.info(f"Created user {user.id}")
        return user

    async def authenticate(self, email: str, password: str) -> str:
        """Check credentials and issue a token.

        Returns:
            Signed bearer token

        Raises:
            AuthenticationFailure: If the email is unknown or the password is wrong
        """
        user = await self.db.find_user_by_email(email)
        if user is None or not verify_password(password, user.salt, user.password_hash):
            self.logger.info(f"Failed login for {email}")
            raise AuthenticationFailure("Invalid email or password")

        return self.tokens.sign(user.id)

    async def current_user(self, token: str) -> str:
        """Resolve a bearer token to the id of an existing user.

        Raises:
            AuthenticationFailure: If the token is invalid or its user no longer exists
        """
        user_id = self.tokens.verify(token)
        try:
            uuid.UUID(user_id)
        except ValueError:
            raise AuthenticationFailure("Invalid token")

        if await self.db.find_user_by_id(user_id) is None:
            raise AuthenticationFailure("Unknown user")
        return user_id

"""Abstract base class for URL shortener database implementations."""

from abc import ABC, abstractmethod
from typing import Optional, List

from .models import ShortLink, User


class ShortenerDBBase(ABC):
    """Abstract base class for URL shortener storage.

    Uniqueness of short codes and emails, and the owner check on delete,
    must be enforced atomically by the implementation itself.
    """

    def __init__(self, db_config: str):
        """Initialize database connection.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def insert_link(self, link: ShortLink) -> ShortLink:
        """Insert a short link.

        Args:
            link: The link to persist

        Returns:
            The stored link

        Raises:
            ConflictError: If the short code is already taken
        """
        pass

    @abstractmethod
    async def find_link_by_code(self, code: str) -> Optional[ShortLink]:
        """Get the link with exactly this code.

        Args:
            code: The short code to lookup (case-sensitive)

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_links_by_owner(self, owner_id: str) -> List[ShortLink]:
        """List all links owned by a user, oldest first.

        Args:
            owner_id: Owning user id

        Returns:
            List of links
        """
        pass

    @abstractmethod
    async def delete_link_if_owned(self, link_id: str, owner_id: str) -> Optional[ShortLink]:
        """Delete a link only if it belongs to the given owner.

        Args:
            link_id: Id of the link to delete
            owner_id: Id of the caller

        Returns:
            The deleted link, or None if no link with that id is owned by the caller
        """
        pass

    @abstractmethod
    async def insert_user(self, user: User) -> User:
        """Insert a user.

        Args:
            user: The user to persist

        Returns:
            The stored user

        Raises:
            ConflictError: If the email is already registered
        """
        pass

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email, or None."""
        pass

    @abstractmethod
    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by id, or None."""
        pass

    @abstractmethod
    async def ensure_tables(self) -> None:
        """Create tables and indexes if they don't exist."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connections."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if database is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass

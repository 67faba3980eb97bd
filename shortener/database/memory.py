"""In-memory implementation for URL shortener.

Each operation completes without awaiting, so a check and the write that
follows it cannot interleave with another coroutine on the same event loop.
State is per process; use PostgreSQL when running more than one worker.
"""

import logging
from typing import Optional, List, Dict

from .base import ShortenerDBBase
from .models import ShortLink, User
from ..errors import ConflictError


class InMemoryShortenerDB(ShortenerDBBase):
    """Dictionary-backed storage for tests and single-process development."""

    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._links_by_id: Dict[str, ShortLink] = {}
        self._link_ids_by_code: Dict[str, str] = {}
        self._users_by_id: Dict[str, User] = {}
        self._user_ids_by_email: Dict[str, str] = {}

    async def ensure_tables(self) -> None:
        self.logger.debug("In-memory storage needs no tables")

    async def insert_link(self, link: ShortLink) -> ShortLink:
        if link.code in self._link_ids_by_code:
            self.logger.warning(f"Short code already exists: {link.code}")
            raise ConflictError(f"Short code '{link.code}' already exists")

        self._links_by_id[link.id] = link
        self._link_ids_by_code[link.code] = link.id
        return link

    async def find_link_by_code(self, code: str) -> Optional[ShortLink]:
        link_id = self._link_ids_by_code.get(code)
        return self._links_by_id.get(link_id) if link_id else None

    async def list_links_by_owner(self, owner_id: str) -> List[ShortLink]:
        # dicts keep insertion order, which is creation order here
        return [link for link in self._links_by_id.values() if link.owner_id == owner_id]

    async def delete_link_if_owned(self, link_id: str, owner_id: str) -> Optional[ShortLink]:
        link = self._links_by_id.get(link_id)
        if link is None or link.owner_id != owner_id:
            return None

        del self._links_by_id[link_id]
        del self._link_ids_by_code[link.code]
        return link

    async def insert_user(self, user: User) -> User:
        if user.email in self._user_ids_by_email:
            self.logger.warning(f"Email already registered: {user.email}")
            raise ConflictError(f"User with this email {user.email} already exists")

        self._users_by_id[user.id] = user
        self._user_ids_by_email[user.email] = user.id
        return user

    async def find_user_by_email(self, email: str) -> Optional[User]:
        user_id = self._user_ids_by_email.get(email)
        return self._users_by_id.get(user_id) if user_id else None

    async def find_user_by_id(self, user_id: str) -> Optional[User]:
        return self._users_by_id.get(user_id)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.logger.debug("Closed in-memory storage")

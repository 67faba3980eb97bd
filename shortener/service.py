"""Business logic service for URL shortener."""

import logging
import uuid
from typing import Optional, List, Dict

from .shortcode import ShortCodeGenerator
from .database.base import ShortenerDBBase
from .database.models import ShortLink
from .errors import ConflictError, NotFoundError, ValidationError


class URLShortenerService:
    """Code registry: create, resolve, list and delete short links."""

    def __init__(
        self,
        db: ShortenerDBBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
    ):
        """Initialize URL shortener service.

        Args:
            db: Storage instance
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Extra attempts after a generated code collides
        """
        self.db = db
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries

    async def create_short_url(
        self,
        target_url: str,
        owner_id: str,
        requested_code: Optional[str] = None,
    ) -> ShortLink:
        """Create a new short link.

        A requested code is stored verbatim. A generated code that collides is
        replaced by a fresh one, at most ``max_collision_retries`` times.

        Args:
            target_url: The redirect destination
            owner_id: Id of the authenticated caller
            requested_code: Optional caller-chosen code

        Returns:
            The stored link

        Raises:
            ValidationError: If target_url or owner_id is empty
            ConflictError: If the code is taken (or no free code was generated)
        """
        if not target_url:
            raise ValidationError("URL is required")
        if not owner_id:
            raise ValidationError("Owner is required")

        if requested_code is not None:
            link = await self.db.insert_link(self._new_link(requested_code, target_url, owner_id))
        else:
            link = await self._insert_with_generated_code(target_url, owner_id)

        self.logger.info(f"Created short URL: {link.code} -> {link.target_url} (owner {owner_id})")
        return link

    async def resolve(self, code: str) -> ShortLink:
        """Get the link for a code.

        Raises:
            NotFoundError: If no link has exactly this code
        """
        link = await self.db.find_link_by_code(code)
        if link is None:
            self.logger.warning(f"Short code not found: {code}")
            raise NotFoundError("Invalid URL")

        self.logger.debug(f"Resolved {code} -> {link.target_url}")
        return link

    async def list_by_owner(self, owner_id: str) -> List[ShortLink]:
        return await self.db.list_links_by_owner(owner_id)

    async def delete_owned(self, link_id: str, owner_id: str) -> ShortLink:
        """Delete a link if, and only if, the caller owns it.

        Someone else's link, an unknown id and a malformed id all raise the
        same NotFoundError.

        Returns:
            The deleted link

        Raises:
            NotFoundError: If the caller owns no link with this id
        """
        try:
            # Stores compare ids in canonical lowercase hyphenated form
            link_id = str(uuid.UUID(link_id))
        except ValueError:
            raise NotFoundError("Short URL not found")

        link = await self.db.delete_link_if_owned(link_id, owner_id)
        if link is None:
            raise NotFoundError("Short URL not found")

        self.logger.info(f"Deleted short URL: {link.code} (owner {owner_id})")
        return link

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.db.health_check()
        return {
            "database": db_healthy,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.db.close()

    async def _insert_with_generated_code(self, target_url: str, owner_id: str) -> ShortLink:
        attempts = self.max_collision_retries + 1
        for attempt in range(attempts):
            code = self.generator.generate_random()
            try:
                return await self.db.insert_link(self._new_link(code, target_url, owner_id))
            except ConflictError:
                self.logger.debug(f"Generated code {code} collided (attempt {attempt + 1}/{attempts})")

        raise ConflictError("Unable to generate unique short code after multiple attempts")

    @staticmethod
    def _new_link(code: str, target_url: str, owner_id: str) -> ShortLink:
        return ShortLink(id=str(uuid.uuid4()), code=code, target_url=target_url, owner_id=owner_id)

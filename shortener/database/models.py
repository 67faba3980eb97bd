"""Data models for URL shortener."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ShortLink:
    """Represents a short code mapping owned by one user."""

    id: str
    code: str
    target_url: str
    owner_id: str
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "code": self.code,
            "targetURL": self.target_url,
            "ownerId": self.owner_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_record(cls, data) -> "ShortLink":
        """Create from a database row or dictionary."""
        created_at = data["created_at"]
        if created_at is not None and not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=str(data["id"]),
            code=data["short_code"],
            target_url=data["target_url"],
            owner_id=str(data["owner_id"]),
            created_at=created_at,
        )


@dataclass
class User:
    """Represents a registered user and their derived credential."""

    id: str
    email: str
    firstname: str
    password_hash: str
    salt: str
    lastname: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_record(cls, data) -> "User":
        """Create from a database row or dictionary."""
        return cls(
            id=str(data["id"]),
            email=data["email"],
            firstname=data["first_name"],
            lastname=data["last_name"],
            password_hash=data["password"],
            salt=data["salt"],
            created_at=data["created_at"],
        )

"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


class WireModel(BaseModel):
    """Responses use the camelCase keys clients already depend on."""

    model_config = ConfigDict(populate_by_name=True)


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten", min_length=1, max_length=2048)
    code: Optional[str] = Field(None, description="Optional custom short code")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "https://github.com/user/repo", "code": "myrepo"},
            ]
        }
    }


class ShortenResponse(WireModel):
    """Response after shortening a URL."""

    id: str = Field(..., description="Id of the short link (used for deletion)")
    code: str = Field(..., description="The short code")
    target_url: str = Field(..., alias="targetURL", description="The original long URL")
    short_url: Optional[str] = Field(None, alias="shortURL", description="The complete short URL")


class ShortLinkResponse(WireModel):
    """One short link owned by the caller."""

    id: str
    code: str
    target_url: str = Field(..., alias="targetURL")
    owner_id: str = Field(..., alias="ownerId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class CodesResponse(BaseModel):
    """All short links owned by the caller."""

    codes: List[ShortLinkResponse]


class DeleteResponse(WireModel):
    """Confirmation of a deleted short link."""

    deleted: bool
    deleted_code_url: str = Field(..., alias="deletedCodeURL")


class SignupRequest(BaseModel):
    """Request to register a user."""

    firstname: str = Field(..., min_length=1, max_length=55)
    lastname: Optional[str] = Field(None, max_length=55)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=3)


class SignupData(WireModel):
    user_id: str = Field(..., alias="userId")


class SignupResponse(BaseModel):
    data: SignupData


class LoginRequest(BaseModel):
    """Request to log in."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str = Field(..., description="Bearer token for the Authorization header")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")

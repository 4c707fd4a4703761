"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- Request models: Accept loosely, validate in the service layer so missing
  and malformed URLs produce the documented 400 messages
- Secret aliases are collapsed into one ``secret`` field on the way in
- Response models: camelCase on the wire (shortUrl, manageUrl, createdAt)
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.core.validators import pick_secret
from app.db.models import Redirect


class CreateRedirectRequest(BaseModel):
    """Request model for the create endpoint."""
    url: Optional[str] = Field(default=None, description="The destination URL to shorten")


class UpdateRedirectRequest(BaseModel):
    """
    Request model for the update endpoint.

    The secret may arrive as secret, token, ownerToken or adminToken.
    """
    model_config = ConfigDict(extra="ignore")

    url: Optional[str] = Field(default=None, description="The new destination URL")
    secret: Optional[str] = Field(default=None, description="Owner secret")

    @model_validator(mode="before")
    @classmethod
    def collect_secret_alias(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {**data, "secret": pick_secret(data)}
        return data


class RedirectRecord(BaseModel):
    """Response model for every /api/url operation."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    slug: str
    url: str
    short_url: str
    secret: str
    manage_url: str
    clicks: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, redirect: Redirect, origin: str) -> "RedirectRecord":
        origin = origin.rstrip("/")
        return cls(
            slug=redirect.slug,
            url=redirect.url,
            short_url=f"{origin}/{redirect.slug}",
            secret=redirect.secret,
            manage_url=f"{origin}/?slug={redirect.slug}&secret={redirect.secret}",
            clicks=redirect.clicks,
            created_at=redirect.created_at,
        )


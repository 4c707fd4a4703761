"""
Database Models for the Redirect Service

This module defines the SQLModel schema for the single persisted entity:
- Redirect: maps a public slug to a destination URL, with a click counter
  and the owner secret that authorizes reads-with-detail and updates

Design Decisions:
- Unique index on slug for fast lookups (most critical path) and to make
  slug collisions surface as IntegrityError instead of overwriting a row
- clicks only changes through an atomic UPDATE ... SET clicks = clicks + 1
- created_at is set once at insert and never part of an UPDATE
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlmodel import Column, Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Redirect(SQLModel, table=True):
    """
    Short link record.

    Fields:
    - id: Auto-incrementing primary key
    - slug: Unique public identifier used as the short URL path
    - url: Absolute http/https destination
    - clicks: Number of successful resolutions
    - secret: Owner capability token (possession = ownership)
    - created_at: Timestamp when the record was inserted
    """
    __tablename__ = "redirects"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(
        sa_column=Column(String(16), nullable=False, unique=True, index=True),
        max_length=16
    )
    url: str = Field(sa_column=Column(Text, nullable=False))
    clicks: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    secret: str = Field(sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )

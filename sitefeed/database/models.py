"""
SiteFeed Data Models
====================

Data models for the feed loader. ``RawFeedEntry`` is the transient shape the
extractor produces; ``NormalizedRecord`` is the validated unit kept in the
record store and handed to page rendering and feed regeneration.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, field_validator


@dataclass
class RawFeedEntry:
    """One ``<item>`` as read from the feed, before any normalization."""

    title: str
    link: str
    pub_date: str
    description: str = ""


class DropReason(str, Enum):
    """Why an extracted entry did not make it into the store."""
    MISSING_REQUIRED_FIELD = "missing_required_field"
    UNRESOLVABLE_IDENTIFIER = "unresolvable_identifier"
    UNPARSEABLE_DATE = "unparseable_date"


class NormalizedRecord(BaseModel):
    """Syndicated post as stored and rendered."""
    id: str = Field(..., min_length=1, description="Slug derived from the post link")
    title: str = Field(..., description="Post title")
    description: str = Field(default="", description="Plain-text description")
    published_at: datetime = Field(..., description="Publication timestamp")
    external_url: str = Field(..., min_length=1, description="Canonical post URL")

    model_config = {"frozen": True}

    @field_validator('published_at')
    @classmethod
    def ensure_timezone(cls, v):
        """Naive timestamps are taken to be UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def __str__(self) -> str:
        return f"NormalizedRecord({self.id}: {self.title[:50]})"

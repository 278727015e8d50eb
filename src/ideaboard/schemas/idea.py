import uuid
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field, field_validator
from .base import ORMBase, UTCDateTime
from ideaboard.models.idea import ContentType, Engagement, IdeaStatus


def _lower(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class IdeaContentCreate(BaseModel):
    # presence / emptiness of title and description is enforced by the
    # service so the error is reported as a validation failure (400)
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    content_type: ContentType = ContentType.BLOG
    keywords: list[str] = Field(default_factory=list)
    target_audience: str | None = None
    estimated_engagement: Engagement = Engagement.MEDIUM
    tone: str | None = None
    industry: str | None = None

    @field_validator("estimated_engagement", "content_type", mode="before")
    @classmethod
    def _lower_enums(cls, v):
        return _lower(v)


class IdeaContentUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    content_type: ContentType | None = None
    keywords: list[str] | None = None
    target_audience: str | None = None
    estimated_engagement: Engagement | None = None
    tone: str | None = None
    industry: str | None = None

    @field_validator("estimated_engagement", "content_type", mode="before")
    @classmethod
    def _lower_enums(cls, v):
        return _lower(v)


class IdeaCreate(BaseModel):
    content: IdeaContentCreate | None = None
    is_saved: bool = False
    is_scheduled: bool | None = None
    scheduled_date: datetime | None = None
    status: IdeaStatus = IdeaStatus.DRAFT
    notes: str = ""


class IdeaUpdate(BaseModel):
    """Partial update; schedule state is changed through the calendar routes."""
    content: IdeaContentUpdate | None = None
    status: IdeaStatus | None = None
    notes: str | None = None
    is_saved: bool | None = None


class IdeaContentRead(BaseModel):
    title: str
    description: str
    content_type: ContentType
    keywords: list[str]
    target_audience: str
    estimated_engagement: Engagement
    tone: str | None = None
    industry: str | None = None


class IdeaRead(ORMBase):
    id: uuid.UUID
    owner_id: uuid.UUID
    content: IdeaContentRead
    status: IdeaStatus
    is_saved: bool
    is_scheduled: bool
    scheduled_date: UTCDateTime | None
    notes: str
    created_at: UTCDateTime
    updated_at: UTCDateTime


class IdeaPage(BaseModel):
    items: list[IdeaRead]
    total: int
    limit: int
    offset: int

"""Idea generation request / response schemas."""

from pydantic import BaseModel, Field, field_validator
from ideaboard.models.idea import ContentType, Engagement
from .idea import IdeaRead


class GenerateIdeasRequest(BaseModel):
    """Parameters for one generation call.

    ``content_type`` and ``industry`` are required but checked by the
    generation service, which reports them as a 400 before any provider
    call. ``count`` falls back to the configured default (3).
    """

    content_type: ContentType | None = None
    industry: str | None = None
    audience: str | None = None
    tone: str | None = None
    count: int | None = None
    topic: str | None = None
    keywords: list[str] = Field(default_factory=list)
    save_drafts: bool = False

    @field_validator("content_type", mode="before")
    @classmethod
    def _lower_content_type(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class IdeaCandidate(BaseModel):
    """Unpersisted idea produced by the generation pipeline."""

    title: str
    description: str
    keywords: list[str]
    target_audience: str
    estimated_engagement: Engagement
    content_type: ContentType
    industry: str
    tone: str | None = None
    audience: str | None = None


class GenerateIdeasResponse(BaseModel):
    candidates: list[IdeaCandidate]
    cached: bool = False
    drafts: list[IdeaRead] = Field(default_factory=list)

import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column, validates
from sqlalchemy import String, Text, DateTime, Boolean, Enum, JSON, ForeignKey
from ideaboard.db.session import Base
from ideaboard.core.idea_parser import normalize_keywords


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContentType(str, enum.Enum):
    BLOG = "blog"
    VIDEO = "video"
    SOCIAL = "social"


class Engagement(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IdeaStatus(str, enum.Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in-progress"
    PUBLISHED = "published"
    ARCHIVED = "archived"


DEFAULT_TARGET_AUDIENCE = "general audience"


def keywords_search_text(keywords: list[str]) -> str:
    return "\n".join(k.casefold() for k in keywords)


class Idea(Base):
    """Content idea owned by a single user.

    ``is_scheduled`` and ``scheduled_date`` move together: the scheduling
    service is the only writer of either column after creation.
    """

    __tablename__ = "idea"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    content_type: Mapped[ContentType] = mapped_column(Enum(ContentType), default=ContentType.BLOG)
    keywords: Mapped[list[str]] = mapped_column(JSON, default=list)
    # casefolded keywords, one per line; searched instead of the JSON text
    keywords_text: Mapped[str] = mapped_column(Text, default="")
    target_audience: Mapped[str] = mapped_column(String(255), default=DEFAULT_TARGET_AUDIENCE)
    estimated_engagement: Mapped[Engagement] = mapped_column(Enum(Engagement), default=Engagement.MEDIUM)
    # generation metadata copied from the request that produced the idea
    tone: Mapped[str | None] = mapped_column(String(100), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[IdeaStatus] = mapped_column(Enum(IdeaStatus), default=IdeaStatus.DRAFT, index=True)
    is_saved: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    is_scheduled: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    scheduled_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    notes: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @validates("keywords")
    def _clean_keywords(self, key, value):
        cleaned = normalize_keywords(value or [])
        self.keywords_text = keywords_search_text(cleaned)
        return cleaned

    @property
    def content(self) -> dict:
        """Nested content view used by the read schemas."""
        return {
            "title": self.title,
            "description": self.description,
            "content_type": self.content_type,
            "keywords": list(self.keywords or []),
            "target_audience": self.target_audience,
            "estimated_engagement": self.estimated_engagement,
            "tone": self.tone,
            "industry": self.industry,
        }

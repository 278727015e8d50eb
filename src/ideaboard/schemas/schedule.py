import uuid
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field
from .base import UTCDateTime
from ideaboard.models.idea import ContentType, Idea, IdeaStatus


class ScheduleRequest(BaseModel):
    # kept loose on purpose: parsing happens in the scheduling service so a
    # bad value surfaces as the same validation error in single and batch mode
    scheduled_date: datetime | str | None = None


class BatchScheduleEntry(BaseModel):
    id: str
    scheduled_date: datetime | str | None = None


class BatchScheduleRequest(BaseModel):
    updates: list[BatchScheduleEntry] = Field(default_factory=list)


class CalendarEvent(BaseModel):
    id: uuid.UUID
    title: str
    start: UTCDateTime | None
    description: str
    content_type: ContentType
    status: IdeaStatus

    @classmethod
    def from_idea(cls, idea: Idea) -> "CalendarEvent":
        return cls(
            id=idea.id,
            title=idea.title,
            start=idea.scheduled_date,
            description=idea.description,
            content_type=idea.content_type,
            status=idea.status,
        )


class BatchScheduleError(BaseModel):
    id: str
    error: str
    reason: Literal["not_found", "not_authorized", "invalid"]


class BatchScheduleData(BaseModel):
    updated: list[CalendarEvent]
    errors: list[BatchScheduleError]


class BatchScheduleResponse(BaseModel):
    updated: int
    errors: int
    data: BatchScheduleData


class CalendarEventList(BaseModel):
    count: int
    data: list[CalendarEvent]

"""Idea service layer.

Owns the idea lifecycle: create, list, read, update and delete, always on
behalf of a requester. Every operation on an existing idea goes through
``resolve_owned_idea`` which checks existence first and ownership second,
raising ``IdeaNotFoundError`` / ``IdeaNotOwnedError`` before anything is
mutated.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.core.errors import IdeaValidationError, IdeaNotFoundError, IdeaNotOwnedError
from ideaboard.core.idea_parser import normalize_keywords
from ideaboard.models.idea import Idea, ContentType, IdeaStatus, DEFAULT_TARGET_AUDIENCE
from ideaboard.repositories import idea as idea_repo
from ideaboard.schemas.idea import IdeaCreate, IdeaUpdate

__all__ = [
    "to_storage_utc",
    "resolve_owned_idea",
    "create_idea",
    "get_idea",
    "list_ideas",
    "update_idea",
    "delete_idea",
]


def to_storage_utc(value: datetime) -> datetime:
    """Timestamps are stored in UTC; naive input is read as server-local time."""
    return value.astimezone(timezone.utc)


def _require_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise IdeaValidationError(f"{field} is required", field=field)
    return text


async def resolve_owned_idea(session: AsyncSession, idea_id: uuid.UUID, requester_id: uuid.UUID) -> Idea:
    idea = await idea_repo.get_by_id(session, idea_id)
    if idea is None:
        raise IdeaNotFoundError(idea_id)
    if idea.owner_id != requester_id:
        raise IdeaNotOwnedError(idea_id)
    return idea


async def create_idea(session: AsyncSession, owner_id: uuid.UUID, data: IdeaCreate) -> Idea:
    content = data.content
    if content is None:
        raise IdeaValidationError("content is required", field="content")
    title = _require_text(content.title, "content.title")
    description = _require_text(content.description, "content.description")

    is_scheduled = data.is_scheduled
    scheduled_date = data.scheduled_date
    if is_scheduled is None:
        is_scheduled = scheduled_date is not None
    if is_scheduled and scheduled_date is None:
        raise IdeaValidationError("scheduled_date is required when is_scheduled is true", field="scheduled_date")
    if not is_scheduled:
        scheduled_date = None

    return await idea_repo.create(
        session,
        owner_id=owner_id,
        title=title,
        description=description,
        content_type=content.content_type,
        keywords=normalize_keywords(content.keywords),
        target_audience=(content.target_audience or "").strip() or DEFAULT_TARGET_AUDIENCE,
        estimated_engagement=content.estimated_engagement,
        tone=content.tone,
        industry=content.industry,
        status=data.status,
        is_saved=data.is_saved,
        is_scheduled=is_scheduled,
        scheduled_date=to_storage_utc(scheduled_date) if scheduled_date else None,
        notes=data.notes,
    )


async def get_idea(session: AsyncSession, idea_id: uuid.UUID, requester_id: uuid.UUID) -> Idea:
    return await resolve_owned_idea(session, idea_id, requester_id)


async def list_ideas(
    session: AsyncSession,
    owner_id: uuid.UUID,
    *,
    content_type: ContentType | None = None,
    is_saved: bool | None = None,
    is_scheduled: bool | None = None,
    status: IdeaStatus | None = None,
    search: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Idea], int]:
    if limit < 1:
        raise IdeaValidationError("limit must be positive", field="limit")
    if offset < 0:
        raise IdeaValidationError("offset must not be negative", field="offset")
    return await idea_repo.list_for_owner(
        session,
        owner_id,
        content_type=content_type,
        is_saved=is_saved,
        is_scheduled=is_scheduled,
        status=status,
        search=(search or "").strip() or None,
        limit=limit,
        offset=offset,
    )


async def update_idea(
    session: AsyncSession, idea_id: uuid.UUID, requester_id: uuid.UUID, data: IdeaUpdate
) -> Idea:
    idea = await resolve_owned_idea(session, idea_id, requester_id)
    changes: dict[str, Any] = {}
    if data.content is not None:
        content = data.content.model_dump(exclude_unset=True)
        if "title" in content:
            changes["title"] = _require_text(content["title"], "content.title")
        if "description" in content:
            changes["description"] = _require_text(content["description"], "content.description")
        if content.get("keywords") is not None:
            changes["keywords"] = normalize_keywords(content["keywords"])
        if "target_audience" in content:
            changes["target_audience"] = (content["target_audience"] or "").strip() or DEFAULT_TARGET_AUDIENCE
        for name in ("content_type", "estimated_engagement"):
            if content.get(name) is not None:
                changes[name] = content[name]
        for name in ("tone", "industry"):
            if name in content:
                changes[name] = content[name]
    if data.status is not None:
        changes["status"] = data.status
    if data.notes is not None:
        changes["notes"] = data.notes
    if data.is_saved is not None:
        changes["is_saved"] = data.is_saved
    if not changes:
        return idea
    return await idea_repo.update(session, idea, **changes)


async def delete_idea(session: AsyncSession, idea_id: uuid.UUID, requester_id: uuid.UUID) -> None:
    idea = await resolve_owned_idea(session, idea_id, requester_id)
    await idea_repo.delete(session, idea)

"""Repository helpers for the Idea model."""

import uuid
from datetime import datetime
from typing import Any, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, delete as sa_delete
from ideaboard.models.idea import Idea, ContentType, IdeaStatus

__all__ = [
    "get_by_id",
    "list_for_owner",
    "list_scheduled",
    "create",
    "update",
    "delete",
    "delete_for_owner",
]


def _escape_like(term: str) -> str:
    """Make ``%`` and ``_`` in user input match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def get_by_id(session: AsyncSession, idea_id: uuid.UUID) -> Optional[Idea]:
    res = await session.execute(select(Idea).where(Idea.id == idea_id))
    return res.scalar_one_or_none()


async def list_for_owner(
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
    """Return one page of an owner's ideas (newest first) plus the filtered total."""
    conditions: list[Any] = [Idea.owner_id == owner_id]
    if content_type is not None:
        conditions.append(Idea.content_type == content_type)
    if is_saved is not None:
        conditions.append(Idea.is_saved == is_saved)
    if is_scheduled is not None:
        conditions.append(Idea.is_scheduled == is_scheduled)
    if status is not None:
        conditions.append(Idea.status == status)
    if search:
        term = search.strip()
        pattern = f"%{_escape_like(term)}%"
        conditions.append(
            or_(
                Idea.title.ilike(pattern, escape="\\"),
                Idea.description.ilike(pattern, escape="\\"),
                Idea.keywords_text.like(f"%{_escape_like(term.casefold())}%", escape="\\"),
            )
        )

    total_res = await session.execute(select(func.count()).select_from(Idea).where(*conditions))
    total = int(total_res.scalar_one())

    stmt = (
        select(Idea)
        .where(*conditions)
        .order_by(Idea.created_at.desc(), Idea.id)
        .offset(offset)
        .limit(limit)
    )
    res = await session.execute(stmt)
    return list(res.scalars().all()), total


async def list_scheduled(
    session: AsyncSession,
    owner_id: uuid.UUID,
    *,
    start: datetime | None = None,
    end: datetime | None = None,
) -> Sequence[Idea]:
    stmt = select(Idea).where(Idea.owner_id == owner_id, Idea.is_scheduled.is_(True))
    if start is not None:
        stmt = stmt.where(Idea.scheduled_date >= start)
    if end is not None:
        stmt = stmt.where(Idea.scheduled_date <= end)
    res = await session.execute(stmt.order_by(Idea.scheduled_date, Idea.id))
    return list(res.scalars().all())


async def create(session: AsyncSession, **fields: Any) -> Idea:
    idea = Idea(**fields)
    session.add(idea)
    # Flush so INSERT is issued and defaults are populated, then refresh to
    # eagerly load them. Lazy loads during Pydantic serialization raise
    # MissingGreenlet under async SQLAlchemy.
    await session.flush()
    await session.refresh(idea)
    return idea


async def update(session: AsyncSession, idea: Idea, **fields: Any) -> Idea:
    for name, value in fields.items():
        setattr(idea, name, value)
    await session.flush()
    await session.refresh(idea)
    return idea


async def delete(session: AsyncSession, idea: Idea) -> None:
    await session.delete(idea)
    await session.flush()


async def delete_for_owner(session: AsyncSession, owner_id: uuid.UUID) -> int:
    res = await session.execute(sa_delete(Idea).where(Idea.owner_id == owner_id))
    return res.rowcount or 0

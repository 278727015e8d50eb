"""Scheduling service layer.

An idea is either Unscheduled (``is_scheduled=False``, no date) or
Scheduled (``is_scheduled=True`` with a date). ``schedule_idea`` moves it to
Scheduled (re-scheduling just replaces the date), ``unschedule_idea`` back to
Unscheduled. Both go through ``resolve_owned_idea`` first.

``batch_schedule`` applies many (id, date) pairs independently: one bad entry
is recorded and skipped, the rest still go through. The batch is not atomic
as a group.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Any, Iterable, Sequence

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.core.errors import IdeaValidationError, IdeaNotFoundError, IdeaNotOwnedError
from ideaboard.models.idea import Idea
from ideaboard.repositories import idea as idea_repo
from ideaboard.services.idea import resolve_owned_idea, to_storage_utc

logger = logging.getLogger(__name__)

__all__ = [
    "BatchItemError",
    "BatchScheduleResult",
    "parse_schedule_date",
    "schedule_idea",
    "unschedule_idea",
    "batch_schedule",
    "list_scheduled",
    "list_scheduled_today",
    "local_day_bounds",
    "batch_entries",
]

_DATETIME = TypeAdapter(datetime)


@dataclass
class BatchItemError:
    id: str
    error: str
    reason: str


@dataclass
class BatchScheduleResult:
    updated: list[Idea] = field(default_factory=list)
    errors: list[BatchItemError] = field(default_factory=list)


def parse_schedule_date(value: Any) -> datetime:
    """Accept datetimes and ISO-8601 strings; naive values are server-local."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise IdeaValidationError("scheduled_date is required", field="scheduled_date")
    try:
        parsed = _DATETIME.validate_python(value.strip() if isinstance(value, str) else value)
    except ValidationError:
        raise IdeaValidationError(f"scheduled_date is not a valid date: {value!r}", field="scheduled_date")
    return to_storage_utc(parsed)


async def schedule_idea(
    session: AsyncSession, idea_id: uuid.UUID, requester_id: uuid.UUID, scheduled_date: Any
) -> Idea:
    when = parse_schedule_date(scheduled_date)
    idea = await resolve_owned_idea(session, idea_id, requester_id)
    return await idea_repo.update(session, idea, is_scheduled=True, scheduled_date=when)


async def unschedule_idea(session: AsyncSession, idea_id: uuid.UUID, requester_id: uuid.UUID) -> Idea:
    idea = await resolve_owned_idea(session, idea_id, requester_id)
    if not idea.is_scheduled and idea.scheduled_date is None:
        return idea
    return await idea_repo.update(session, idea, is_scheduled=False, scheduled_date=None)


async def batch_schedule(
    session: AsyncSession, requester_id: uuid.UUID, entries: Sequence[tuple[Any, Any]]
) -> BatchScheduleResult:
    if not entries:
        raise IdeaValidationError("updates must contain at least one entry", field="updates")
    result = BatchScheduleResult()
    for raw_id, raw_date in entries:
        entry_id = str(raw_id)
        try:
            idea_id = raw_id if isinstance(raw_id, uuid.UUID) else uuid.UUID(entry_id)
        except ValueError:
            result.errors.append(BatchItemError(entry_id, str(IdeaNotFoundError(entry_id)), "not_found"))
            continue
        try:
            idea = await schedule_idea(session, idea_id, requester_id, raw_date)
        except IdeaNotFoundError as e:
            result.errors.append(BatchItemError(entry_id, str(e), "not_found"))
        except IdeaNotOwnedError as e:
            result.errors.append(BatchItemError(entry_id, str(e), "not_authorized"))
        except IdeaValidationError as e:
            result.errors.append(BatchItemError(entry_id, str(e), "invalid"))
        else:
            result.updated.append(idea)
    if result.errors:
        logger.info(
            "batch schedule finished with failures",
            extra={"updated": len(result.updated), "failed": len(result.errors)},
        )
    return result


async def list_scheduled(
    session: AsyncSession,
    owner_id: uuid.UUID,
    *,
    start: Any = None,
    end: Any = None,
) -> list[Idea]:
    """Scheduled ideas for ``owner_id``, optionally bounded (inclusive) by date."""
    lower = parse_schedule_date(start) if start is not None else None
    upper = parse_schedule_date(end) if end is not None else None
    return list(await idea_repo.list_scheduled(session, owner_id, start=lower, end=upper))


def local_day_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """00:00:00.000 and 23:59:59.999 of ``now``'s calendar day in server-local time."""
    now = now.astimezone() if now is not None else datetime.now().astimezone()
    start = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    end = datetime.combine(now.date(), time(23, 59, 59, 999000), tzinfo=now.tzinfo)
    return to_storage_utc(start), to_storage_utc(end)


async def list_scheduled_today(
    session: AsyncSession, owner_id: uuid.UUID, *, now: datetime | None = None
) -> list[Idea]:
    start, end = local_day_bounds(now)
    return list(await idea_repo.list_scheduled(session, owner_id, start=start, end=end))


def batch_entries(updates: Iterable[Any]) -> list[tuple[Any, Any]]:
    """Flatten request entries (objects with ``id`` / ``scheduled_date``) to pairs."""
    return [(u.id, u.scheduled_date) for u in updates]

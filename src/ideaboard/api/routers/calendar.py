import uuid
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.api import deps
from ideaboard.core.errors import IdeaNotFoundError, IdeaNotOwnedError, IdeaValidationError
from ideaboard.schemas.idea import IdeaRead
from ideaboard.schemas.schedule import (
    BatchScheduleData,
    BatchScheduleError,
    BatchScheduleRequest,
    BatchScheduleResponse,
    CalendarEvent,
    CalendarEventList,
    ScheduleRequest,
)
from ideaboard.services.schedule import (
    batch_entries,
    batch_schedule,
    list_scheduled,
    list_scheduled_today,
    schedule_idea,
    unschedule_idea,
)

router = APIRouter(prefix="/calendar", tags=["calendar"])


def _events(ideas) -> CalendarEventList:
    data = [CalendarEvent.from_idea(i) for i in ideas]
    return CalendarEventList(count=len(data), data=data)


@router.get(
    "/",
    response_model=CalendarEventList,
    summary="List scheduled ideas",
    description="Scheduled ideas of the requester in ascending date order. "
    "start / end are inclusive ISO-8601 bounds, either may be omitted.",
)
async def list_calendar_route(
    start: str | None = Query(None),
    end: str | None = Query(None),
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    try:
        ideas = await list_scheduled(session, requester_id, start=start, end=end)
    except IdeaValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _events(ideas)


@router.get("/today", response_model=CalendarEventList, summary="Ideas scheduled for today")
async def list_today_route(
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    return _events(await list_scheduled_today(session, requester_id))


@router.put(
    "/batch",
    response_model=BatchScheduleResponse,
    summary="Schedule several ideas",
    description="Each entry is applied on its own; failures are reported per entry "
    "and do not undo the entries that succeeded.",
)
async def batch_schedule_route(
    payload: BatchScheduleRequest,
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    try:
        result = await batch_schedule(session, requester_id, batch_entries(payload.updates))
    except IdeaValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    await session.commit()
    return BatchScheduleResponse(
        updated=len(result.updated),
        errors=len(result.errors),
        data=BatchScheduleData(
            updated=[CalendarEvent.from_idea(i) for i in result.updated],
            errors=[BatchScheduleError(id=e.id, error=e.error, reason=e.reason) for e in result.errors],
        ),
    )


@router.put("/{idea_id}", response_model=IdeaRead, summary="Schedule an idea")
async def schedule_idea_route(
    idea_id: uuid.UUID,
    payload: ScheduleRequest,
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    try:
        idea = await schedule_idea(session, idea_id, requester_id, payload.scheduled_date)
    except IdeaValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except IdeaNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except IdeaNotOwnedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    await session.commit()
    return idea  # type: ignore


@router.delete("/{idea_id}", response_model=IdeaRead, summary="Unschedule an idea")
async def unschedule_idea_route(
    idea_id: uuid.UUID,
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    try:
        idea = await unschedule_idea(session, idea_id, requester_id)
    except IdeaNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except IdeaNotOwnedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    await session.commit()
    return idea  # type: ignore

import uuid
from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.api import deps
from ideaboard.core.cache import ResponseCache
from ideaboard.core.config import get_settings
from ideaboard.core.errors import (
    GenerationUnavailable,
    IdeaNotFoundError,
    IdeaNotOwnedError,
    IdeaValidationError,
)
from ideaboard.core.modelhub import TextGenerator
from ideaboard.models.idea import ContentType, IdeaStatus
from ideaboard.schemas.generation import GenerateIdeasRequest, GenerateIdeasResponse
from ideaboard.schemas.idea import IdeaCreate, IdeaPage, IdeaRead, IdeaUpdate
from ideaboard.services.generation import generate_ideas
from ideaboard.services.idea import (
    create_idea,
    delete_idea,
    get_idea,
    list_ideas,
    update_idea,
)

router = APIRouter(prefix="/ideas", tags=["ideas"])


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, IdeaNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, IdeaNotOwnedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


# Declared before "/{idea_id}" so the literal path wins.
@router.post(
    "/generate",
    response_model=GenerateIdeasResponse,
    summary="Generate idea candidates",
    description="Ask the configured model for content ideas. Candidates are returned unsaved; "
    "with save_drafts=true they are also stored as unsaved drafts owned by the requester.",
)
async def generate_ideas_route(
    payload: GenerateIdeasRequest,
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
    generator: TextGenerator = Depends(deps.get_text_generator),
    cache: ResponseCache = Depends(deps.get_response_cache),
):
    try:
        outcome = await generate_ideas(session, requester_id, payload, generator=generator, cache=cache)
    except IdeaValidationError as e:
        raise _http_error(e)
    except GenerationUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    if outcome.drafts:
        await session.commit()
    return GenerateIdeasResponse(
        candidates=outcome.candidates,
        cached=outcome.cached,
        drafts=[IdeaRead.model_validate(d) for d in outcome.drafts],
    )


@router.post(
    "/",
    response_model=IdeaRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an idea",
)
async def create_idea_route(
    payload: IdeaCreate,
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    try:
        idea = await create_idea(session, requester_id, payload)
    except IdeaValidationError as e:
        raise _http_error(e)
    await session.commit()
    return idea  # type: ignore


@router.get(
    "/",
    response_model=IdeaPage,
    summary="List ideas",
    description="List the requester's ideas, newest first, with optional filters.",
)
async def list_ideas_route(
    content_type: ContentType | None = Query(None),
    is_saved: bool | None = Query(None),
    is_scheduled: bool | None = Query(None),
    status_filter: IdeaStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, description="Substring match on title, description and keywords"),
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    settings = get_settings()
    limit = min(limit or settings.pagination_default_limit, settings.pagination_max_limit)
    try:
        items, total = await list_ideas(
            session,
            requester_id,
            content_type=content_type,
            is_saved=is_saved,
            is_scheduled=is_scheduled,
            status=status_filter,
            search=search,
            limit=limit,
            offset=offset,
        )
    except IdeaValidationError as e:
        raise _http_error(e)
    return IdeaPage(
        items=[IdeaRead.model_validate(i) for i in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{idea_id}", response_model=IdeaRead, summary="Get an idea")
async def get_idea_route(
    idea_id: uuid.UUID,
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    try:
        return await get_idea(session, idea_id, requester_id)  # type: ignore
    except (IdeaNotFoundError, IdeaNotOwnedError) as e:
        raise _http_error(e)


@router.patch("/{idea_id}", response_model=IdeaRead, summary="Update an idea")
async def update_idea_route(
    idea_id: uuid.UUID,
    payload: IdeaUpdate,
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    try:
        idea = await update_idea(session, idea_id, requester_id, payload)
    except (IdeaNotFoundError, IdeaNotOwnedError, IdeaValidationError) as e:
        raise _http_error(e)
    await session.commit()
    return idea  # type: ignore


@router.delete("/{idea_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an idea")
async def delete_idea_route(
    idea_id: uuid.UUID,
    session: AsyncSession = Depends(deps.get_db),
    requester_id: uuid.UUID = Depends(deps.get_requester_id),
):
    try:
        await delete_idea(session, idea_id, requester_id)
    except (IdeaNotFoundError, IdeaNotOwnedError) as e:
        raise _http_error(e)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.core.errors import IdeaNotFoundError, IdeaNotOwnedError, IdeaValidationError
from ideaboard.models.idea import ContentType, IdeaStatus
from ideaboard.repositories import user as user_repo
from ideaboard.schemas.idea import IdeaContentCreate, IdeaContentUpdate, IdeaCreate, IdeaUpdate
from ideaboard.services import idea as idea_service


async def _user(session: AsyncSession, email: str) -> uuid.UUID:
    return (await user_repo.create(session, email=email, id=uuid.uuid4())).id


def _payload(**overrides) -> IdeaCreate:
    content = {"title": "Launch post", "description": "Announce the launch", "keywords": ["launch"]}
    content.update(overrides.pop("content", {}))
    return IdeaCreate(content=IdeaContentCreate(**content), **overrides)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_defaults(db_session: AsyncSession):
    owner = await _user(db_session, "creator@example.com")
    idea = await idea_service.create_idea(db_session, owner, _payload())
    assert idea.owner_id == owner
    assert idea.is_saved is False
    assert idea.is_scheduled is False and idea.scheduled_date is None
    assert idea.status is IdeaStatus.DRAFT
    assert idea.target_audience == "general audience"


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "payload",
    [
        IdeaCreate(content=None),
        IdeaCreate(content=IdeaContentCreate(title="  ", description="d")),
        IdeaCreate(content=IdeaContentCreate(title="t", description="")),
        IdeaCreate(content=IdeaContentCreate(title="t", description="d"), is_scheduled=True),
    ],
)
async def test_create_rejects_incomplete_payloads(db_session: AsyncSession, payload):
    owner = await _user(db_session, "invalid@example.com")
    with pytest.raises(IdeaValidationError):
        await idea_service.create_idea(db_session, owner, payload)
    _, total = await idea_service.list_ideas(db_session, owner)
    assert total == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_with_date_is_scheduled(db_session: AsyncSession):
    owner = await _user(db_session, "sched@example.com")
    when = datetime(2031, 1, 2, 10, 30, tzinfo=timezone.utc)
    idea = await idea_service.create_idea(db_session, owner, _payload(scheduled_date=when))
    assert idea.is_scheduled is True
    assert idea.scheduled_date.replace(tzinfo=timezone.utc) == when


@pytest.mark.asyncio
@pytest.mark.unit
async def test_ownership_checked_after_existence(db_session: AsyncSession):
    owner = await _user(db_session, "mine@example.com")
    intruder = await _user(db_session, "intruder@example.com")
    idea = await idea_service.create_idea(db_session, owner, _payload())

    with pytest.raises(IdeaNotOwnedError):
        await idea_service.get_idea(db_session, idea.id, intruder)
    with pytest.raises(IdeaNotOwnedError):
        await idea_service.update_idea(
            db_session, idea.id, intruder, IdeaUpdate(content=IdeaContentUpdate(title="hijacked"))
        )
    with pytest.raises(IdeaNotOwnedError):
        await idea_service.delete_idea(db_session, idea.id, intruder)
    with pytest.raises(IdeaNotFoundError):
        await idea_service.get_idea(db_session, uuid.uuid4(), intruder)

    unchanged = await idea_service.get_idea(db_session, idea.id, owner)
    assert unchanged.title == "Launch post"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_merges_only_given_fields(db_session: AsyncSession):
    owner = await _user(db_session, "merge@example.com")
    idea = await idea_service.create_idea(
        db_session, owner, _payload(content={"content_type": "video", "tone": "playful"})
    )
    updated = await idea_service.update_idea(
        db_session,
        idea.id,
        owner,
        IdeaUpdate(content=IdeaContentUpdate(keywords=["ai", "AI", "", "growth", "growth"]), is_saved=True),
    )
    assert updated.keywords == ["ai", "AI", "growth"]
    assert updated.is_saved is True
    assert updated.title == "Launch post"
    assert updated.content_type is ContentType.VIDEO
    assert updated.tone == "playful"

    with pytest.raises(IdeaValidationError):
        await idea_service.update_idea(
            db_session, idea.id, owner, IdeaUpdate(content=IdeaContentUpdate(title=" "))
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_rejects_bad_pagination(db_session: AsyncSession):
    owner = await _user(db_session, "pages@example.com")
    with pytest.raises(IdeaValidationError):
        await idea_service.list_ideas(db_session, owner, limit=0)
    with pytest.raises(IdeaValidationError):
        await idea_service.list_ideas(db_session, owner, offset=-1)

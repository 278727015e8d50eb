"""User service layer.

Provides higher-level operations around the `User` repository, enforcing
business rules (like email uniqueness) and raising domain-specific
exceptions instead of returning ``None``.
"""
from __future__ import annotations

import uuid
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.core.errors import UserNotFoundError, DuplicateEmailError
from ideaboard.schemas.user import UserCreate
from ideaboard.models.user import User
from ideaboard.repositories import user as user_repo
from ideaboard.repositories import idea as idea_repo

__all__ = [
    "UserNotFoundError",
    "DuplicateEmailError",
    "create_user",
    "get_user_or_404",
    "delete_user",
    "update_user_email",
    "list_users",
]

async def create_user(session: AsyncSession, data: UserCreate) -> User:
    if await user_repo.email_exists(session, data.email):
        raise DuplicateEmailError()
    # If an id was explicitly provided (test/tool use-case), honor it.
    return await user_repo.create(
        session,
        email=data.email,
        id=data.id or uuid.uuid4(),
        name=data.name,
        role=data.role,
    )

async def get_user_or_404(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await user_repo.get_by_id(session, user_id)
    if not user:
        raise UserNotFoundError()
    return user

async def delete_user(session: AsyncSession, user_id: uuid.UUID) -> None:
    user = await get_user_or_404(session, user_id)
    # not every backend enforces ON DELETE CASCADE (sqlite without the pragma)
    await idea_repo.delete_for_owner(session, user_id)
    await session.delete(user)  # type: ignore[arg-type]

async def update_user_email(session: AsyncSession, user_id: uuid.UUID, new_email: str) -> User:
    user = await get_user_or_404(session, user_id)
    if user.email == new_email:
        return user
    if await user_repo.email_exists(session, new_email):
        raise DuplicateEmailError()
    user.email = new_email  # type: ignore[assignment]
    await session.flush()
    return user

async def list_users(session: AsyncSession) -> list[User]:
    return await user_repo.list_all(session)

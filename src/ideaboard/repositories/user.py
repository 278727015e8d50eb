import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from ideaboard.models.user import User

async def get_by_id(session: AsyncSession, id: uuid.UUID) -> Optional[User]:
    res = await session.execute(select(User).where(User.id == id))
    return res.scalar_one_or_none()

async def email_exists(session: AsyncSession, email: str) -> bool:
    res = await session.execute(select(User.id).where(User.email == email).limit(1))
    return res.scalar_one_or_none() is not None

async def create(session: AsyncSession, email: str, id: uuid.UUID, name: str = "", role: str = "user") -> User:
    user = User(email=email, id=id, name=name, role=role)
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user

async def list_all(session: AsyncSession) -> list[User]:
    res = await session.execute(select(User).order_by(User.created_at))
    return list(res.scalars().all())

"""Сервис для работы с пользователями"""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from database.models.profile import Profile


async def find_profile_by_email(
    session: AsyncSession,
    email: str
) -> Optional[Profile]:
    """Найти профиль по email (без учета регистра)"""
    result = await session.execute(
        select(Profile).where(func.lower(Profile.email) == email.strip().lower())
    )
    return result.scalars().first()

from typing import Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import User


class UserRepository(IUserRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.exec(stmt)
        return result.first()

    async def get_many(self, user_ids: Iterable[UUID]) -> Dict[UUID, User]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.session.exec(select(User).where(col(User.id).in_(ids)))
        return {user.id: user for user in result.all()}

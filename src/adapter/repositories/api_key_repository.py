from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.api_key_repository import IApiKeyRepository
from src.domain.entities import ApiKey


class ApiKeyRepository(IApiKeyRepository):
    """ApiKey repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, key_id: UUID) -> Optional[ApiKey]:
        """Get API key by ID"""
        stmt = select(ApiKey).where(ApiKey.id == key_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_lookup(self, key_lookup: str) -> Optional[ApiKey]:
        """Get API key by its non-secret lookup segment"""
        stmt = select(ApiKey).where(ApiKey.key_lookup == key_lookup)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_by_tenant_id(self, tenant_id: UUID) -> List[ApiKey]:
        """Get all active (not revoked) API keys of a tenant, newest first"""
        stmt = (
            select(ApiKey)
            .where(
                ApiKey.tenant_id == tenant_id,
                ApiKey.is_active == True,  # noqa: E712
                ApiKey.revoked_at.is_(None),
            )
            .order_by(ApiKey.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, api_key: ApiKey) -> ApiKey:
        """Create a new API key"""
        self.session.add(api_key)
        await self.session.flush()
        await self.session.refresh(api_key)
        return api_key

    async def update(self, api_key: ApiKey) -> ApiKey:
        """Update existing API key"""
        self.session.add(api_key)
        await self.session.flush()
        await self.session.refresh(api_key)
        return api_key

    async def touch_last_used(self, key_id: UUID, used_at: datetime) -> None:
        """Record last usage without loading the row"""
        stmt = update(ApiKey).where(ApiKey.id == key_id).values(last_used_at=used_at)
        await self.session.execute(stmt)

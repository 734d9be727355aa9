from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import ApiKey


class IApiKeyRepository(ABC):
    """ApiKey repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, key_id: UUID) -> Optional[ApiKey]:
        """Get API key by ID"""
        pass

    @abstractmethod
    async def get_by_lookup(self, key_lookup: str) -> Optional[ApiKey]:
        """Get API key by its non-secret lookup segment"""
        pass

    @abstractmethod
    async def get_active_by_tenant_id(self, tenant_id: UUID) -> List[ApiKey]:
        """Get all active (not revoked) API keys of a tenant, newest first"""
        pass

    @abstractmethod
    async def create(self, api_key: ApiKey) -> ApiKey:
        """Create a new API key"""
        pass

    @abstractmethod
    async def update(self, api_key: ApiKey) -> ApiKey:
        """Update existing API key"""
        pass

    @abstractmethod
    async def touch_last_used(self, key_id: UUID, used_at: datetime) -> None:
        """Record last usage without loading the row"""
        pass

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Invitation


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invitation]:
        pass

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        pass

    @abstractmethod
    async def get_by_tenant_id(self, tenant_id: UUID) -> List[Invitation]:
        """All invitations of a tenant, oldest first"""
        pass

    @abstractmethod
    async def get_open_for_email(
        self, tenant_id: UUID, email: str, now: datetime
    ) -> Optional[Invitation]:
        """Pending, unexpired invitation of `email` to the tenant, if any"""
        pass

    @abstractmethod
    async def add(self, invitation: Invitation) -> Invitation:
        pass

    @abstractmethod
    async def save(self, invitation: Invitation) -> Invitation:
        pass

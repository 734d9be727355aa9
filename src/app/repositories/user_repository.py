from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """Read access to principals; users are provisioned by the auth provider"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Lookup by lowercased email"""
        pass

    @abstractmethod
    async def get_many(self, user_ids: Iterable[UUID]) -> Dict[UUID, User]:
        """Users keyed by id; unknown ids are absent from the result"""
        pass

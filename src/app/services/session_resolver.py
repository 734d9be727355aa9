from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID


class ISessionResolver(ABC):
    """External auth collaborator: maps an opaque session credential to a principal"""

    @abstractmethod
    async def resolve(self, credential: str) -> Optional[UUID]:
        """
        Resolve a session credential.

        Returns:
            Principal (user) id, or None if the credential is invalid or expired
        """
        pass

from abc import ABC, abstractmethod

from src.domain.entities import AuditEvent


class IAuditEventRepository(ABC):
    """Append-only audit trail; written in the caller's transaction"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        pass

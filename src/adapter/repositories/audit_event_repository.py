import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.domain.entities import AuditEvent

logger = logging.getLogger(__name__)


class AuditEventRepository(IAuditEventRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        # flushed with the business change it records, never on its own
        self.session.add(audit_event)
        logger.debug(f"Audit {audit_event.action} for tenant {audit_event.tenant_id}")
        return audit_event

from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.webhook_event_repository import IWebhookEventRepository
from src.domain.entities import WebhookEvent, WebhookEventStatus


class WebhookEventRepository(IWebhookEventRepository):
    """
    WebhookEvent repository implementation using SQLModel.

    insert_if_absent and claim_failed commit immediately: the gate record
    must be visible to concurrent deliveries before processing starts.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_event_id(self, event_id: str) -> Optional[WebhookEvent]:
        """Get webhook event record by provider event id"""
        stmt = select(WebhookEvent).where(WebhookEvent.event_id == event_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def insert_if_absent(self, event: WebhookEvent) -> bool:
        """Single unique-constrained insert; a conflict means the id was seen"""
        self.session.add(event)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            return False
        await self.session.commit()
        return True

    async def claim_failed(self, event_id: str) -> bool:
        """Conditional update failed -> processing; only one caller can win"""
        stmt = (
            update(WebhookEvent)
            .where(
                WebhookEvent.event_id == event_id,
                WebhookEvent.status == WebhookEventStatus.failed,
            )
            .values(status=WebhookEventStatus.processing)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def update(self, event: WebhookEvent) -> WebhookEvent:
        """Update existing webhook event record"""
        self.session.add(event)
        await self.session.flush()
        await self.session.refresh(event)
        return event

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invitation_repository import IInvitationRepository
from src.domain.entities import Invitation, InvitationStatus


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        result = await self.session.exec(select(Invitation).where(Invitation.token == token))
        return result.one_or_none()

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        return await self.session.get(Invitation, invitation_id)

    async def get_by_tenant_id(self, tenant_id: UUID) -> List[Invitation]:
        stmt = (
            select(Invitation)
            .where(Invitation.tenant_id == tenant_id)
            .order_by(Invitation.created_at)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_open_for_email(
        self, tenant_id: UUID, email: str, now: datetime
    ) -> Optional[Invitation]:
        # expired invitations stay pending in storage but no longer block a new one
        stmt = (
            select(Invitation)
            .where(
                Invitation.tenant_id == tenant_id,
                Invitation.email == email,
                Invitation.status == InvitationStatus.pending,
                Invitation.expires_at > now,
            )
            .order_by(Invitation.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def add(self, invitation: Invitation) -> Invitation:
        self.session.add(invitation)
        await self.session.flush()
        return invitation

    async def save(self, invitation: Invitation) -> Invitation:
        self.session.add(invitation)
        await self.session.flush()
        return invitation

"""
List Invitations Use Case
"""

from datetime import datetime
from typing import List
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import InvitationStatus

from .dtos import InvitationInfo


class ListInvitationsUseCase:
    """Lists every invitation of an already authorized tenant, oldest first."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> Result[List[InvitationInfo]]:
        now = datetime.utcnow()

        async with self.uow:
            invitations = await self.uow.invitations.get_by_tenant_id(tenant_id)
            inviters = await self.uow.users.get_many(i.invited_by for i in invitations)

            items = []
            for invitation in invitations:
                inviter = inviters.get(invitation.invited_by)
                is_expired = invitation.expires_at < now
                items.append(
                    InvitationInfo(
                        id=str(invitation.id),
                        email=invitation.email,
                        role=invitation.role.value,
                        status=invitation.status.value,
                        invited_by=str(invitation.invited_by),
                        invited_by_email=inviter.email if inviter else None,
                        created_at=invitation.created_at.isoformat(),
                        expires_at=invitation.expires_at.isoformat(),
                        accepted_at=(
                            invitation.accepted_at.isoformat() if invitation.accepted_at else None
                        ),
                        is_expired=is_expired,
                        is_pending=(
                            invitation.status == InvitationStatus.pending and not is_expired
                        ),
                    )
                )

            return Return.ok(items)

"""
Revoke Invitation Use Case
"""

from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, InvitationStatus

from .dtos import RevokeInvitationResponse


class RevokeInvitationUseCase:
    """
    Use case for revoking a pending invitation.

    Business Rules:
    - Caller is already authorized as admin or above for the tenant
    - Invitations of other tenants are reported as not found
    - Accepted invitations cannot be revoked; revoking is terminal
    - The token stops working immediately
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, invitation_id: UUID
    ) -> Result[RevokeInvitationResponse]:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None or invitation.tenant_id != tenant_id:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            if invitation.status == InvitationStatus.accepted:
                return Return.err(
                    Error(
                        "INVITATION_ALREADY_ACCEPTED",
                        "This invitation has already been accepted",
                    )
                )

            if invitation.status == InvitationStatus.revoked:
                return Return.err(
                    Error("INVITATION_REVOKED", "This invitation has already been revoked")
                )

            invitation.status = InvitationStatus.revoked
            await self.uow.invitations.save(invitation)

            audit = AuditEvent(
                tenant_id=tenant_id,
                user_id=actor_user_id,
                action="invitation_revoked",
                event_metadata={"invitation_id": str(invitation.id), "email": invitation.email},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(RevokeInvitationResponse(id=str(invitation.id), status="revoked"))

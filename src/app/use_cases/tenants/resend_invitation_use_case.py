"""
Resend Invitation Use Case

Renews a pending invitation so it can be delivered again.
"""

from datetime import datetime
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, InvitationStatus

from .dtos import InviteUserResponse
from .invite_user_use_case import INVITATION_TTL


class ResendInvitationUseCase:
    """
    Business Rules:
    - Caller is already authorized as admin or above for the tenant
    - Only pending invitations can be resent
    - An expired invitation gets a fresh 7-day expiration, unless a newer
      open invitation for the same email exists
    - The token is unchanged and returned for delivery
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, invitation_id: UUID
    ) -> Result[InviteUserResponse]:
        now = datetime.utcnow()

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
                    Error("INVITATION_REVOKED", "This invitation has been revoked")
                )

            if invitation.expires_at < now:
                newer = await self.uow.invitations.get_open_for_email(
                    tenant_id, invitation.email, now
                )
                if newer is not None:
                    return Return.err(
                        Error(
                            "INVITE_ALREADY_EXISTS",
                            "A pending invitation already exists for this email",
                        )
                    )
                invitation.expires_at = now + INVITATION_TTL
                invitation = await self.uow.invitations.save(invitation)

            audit = AuditEvent(
                tenant_id=tenant_id,
                user_id=actor_user_id,
                action="invitation_resent",
                event_metadata={"invitation_id": str(invitation.id), "email": invitation.email},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                InviteUserResponse(
                    invite_id=str(invitation.id),
                    email=invitation.email,
                    role=invitation.role.value,
                    status=invitation.status.value,
                    token=invitation.token,
                    expires_at=invitation.expires_at.isoformat(),
                )
            )

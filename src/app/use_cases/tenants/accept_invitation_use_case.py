"""
Accept Invitation Use Case

Turns a pending invitation into a membership for the signed-in user.
"""

from datetime import datetime
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, InvitationStatus, Membership
from src.domain.plans import PlanCatalog

from .dtos import AcceptInvitationResponse, OrganizationInfo


class AcceptInvitationUseCase:
    """
    Use case for accepting tenant invitations.

    Business Rules:
    - Token is single use: accepted or revoked invitations are rejected
    - Expired invitations are rejected
    - Email of the signed-in user must match the invitation (security check)
    - A user who is already a member cannot accept again
    - Member count is limited by the tenant's plan
    """

    def __init__(self, uow: UnitOfWork, plans: PlanCatalog):
        self.uow = uow
        self.plans = plans

    async def execute(self, user_id: UUID, token: str) -> Result[AcceptInvitationResponse]:
        """
        Execute accept invitation use case.

        Args:
            user_id: Signed-in user accepting the invitation
            token: Invitation token

        Returns:
            Result with AcceptInvitationResponse DTO, or Error
        """
        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)
            if invitation is None:
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or non-existent invitation token")
                )

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

            now = datetime.utcnow()
            if invitation.expires_at < now:
                return Return.err(
                    Error("INVITATION_EXPIRED", "This invitation has expired")
                )

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if user.email.lower() != invitation.email.lower():
                return Return.err(
                    Error(
                        "INVITATION_EMAIL_MISMATCH",
                        "This invitation was sent to a different email address",
                    )
                )

            tenant = await self.uow.tenants.get_by_id(invitation.tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            existing_membership = await self.uow.memberships.get_by_user_and_tenant(
                user.id, tenant.id
            )
            if existing_membership:
                return Return.err(
                    Error("ALREADY_MEMBER", "User is already a member of this tenant")
                )

            member_count = await self.uow.memberships.count_by_tenant_id(tenant.id)
            limit = self.plans.get(tenant.plan_tier).limits.members
            if not self.plans.within_limit(limit, member_count):
                return Return.err(
                    Error(
                        "PLAN_LIMIT_REACHED",
                        f"The {tenant.plan_tier.value} plan allows at most {limit} members",
                    )
                )

            membership = Membership(
                user_id=user.id,
                tenant_id=tenant.id,
                role=invitation.role,
                invited_by=invitation.invited_by,
            )
            await self.uow.memberships.create(membership)

            invitation.status = InvitationStatus.accepted
            invitation.accepted_by = user.id
            invitation.accepted_at = now
            await self.uow.invitations.save(invitation)

            audit = AuditEvent(
                tenant_id=tenant.id,
                user_id=user.id,
                action="invitation_accepted",
                event_metadata={
                    "invitation_id": str(invitation.id),
                    "role": invitation.role.value,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                AcceptInvitationResponse(
                    organization=OrganizationInfo(
                        id=str(tenant.id),
                        name=tenant.name,
                        slug=tenant.slug,
                        plan_tier=tenant.plan_tier.value,
                        subscription_status=tenant.subscription_status.value,
                        role=invitation.role.value,
                    )
                )
            )

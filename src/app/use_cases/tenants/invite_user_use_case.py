"""
Invite User to Tenant Use Case

Handles inviting users to join a tenant with specified roles.
"""

import secrets
from datetime import datetime, timedelta
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ASSIGNABLE_ROLES, AuditEvent, Invitation, MembershipRole
from src.domain.plans import PlanCatalog

from .dtos import InviteUserResponse

INVITATION_TTL = timedelta(days=7)


class InviteUserUseCase:
    """
    Use case for inviting users to join a tenant.

    Business Rules:
    - Caller is already authorized as admin or above for the tenant
    - Role must be one of admin/member/viewer
    - Prevent duplicate open invitations; an expired one does not count
    - Prevent inviting existing members
    - Member count is limited by the tenant's plan
    - Creates invitation with 7-day expiration
    - Generates cryptographically secure token
    - Creates audit event for compliance tracking
    """

    def __init__(self, uow: UnitOfWork, plans: PlanCatalog):
        self.uow = uow
        self.plans = plans

    async def execute(
        self, inviter_user_id: UUID, tenant_id: UUID, email: str, role: str
    ) -> Result[InviteUserResponse]:
        """
        Execute invite user use case.

        Args:
            inviter_user_id: User ID of the person sending the invite
            tenant_id: Target tenant ID
            email: Email address to invite
            role: Role to assign (admin/member/viewer)

        Returns:
            Result with InviteUserResponse DTO, or Error
        """
        try:
            membership_role = MembershipRole(role)
        except ValueError:
            membership_role = None

        if membership_role not in ASSIGNABLE_ROLES:
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {role}. Must be one of: admin, member, viewer",
                )
            )

        email = email.strip().lower()

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                existing_membership = await self.uow.memberships.get_by_user_and_tenant(
                    existing_user.id, tenant_id
                )
                if existing_membership:
                    return Return.err(
                        Error("ALREADY_MEMBER", "User is already a member of this tenant")
                    )

            now = datetime.utcnow()
            open_invitation = await self.uow.invitations.get_open_for_email(tenant_id, email, now)
            if open_invitation:
                return Return.err(
                    Error(
                        "INVITE_ALREADY_EXISTS",
                        "A pending invitation already exists for this email",
                    )
                )

            member_count = await self.uow.memberships.count_by_tenant_id(tenant_id)
            limit = self.plans.get(tenant.plan_tier).limits.members
            if not self.plans.within_limit(limit, member_count):
                return Return.err(
                    Error(
                        "PLAN_LIMIT_REACHED",
                        f"The {tenant.plan_tier.value} plan allows at most {limit} members",
                    )
                )

            invitation = Invitation(
                tenant_id=tenant_id,
                email=email,
                role=membership_role,
                token=secrets.token_urlsafe(32),
                invited_by=inviter_user_id,
                expires_at=now + INVITATION_TTL,
            )
            invitation = await self.uow.invitations.add(invitation)

            audit = AuditEvent(
                tenant_id=tenant_id,
                user_id=inviter_user_id,
                action="user_invited",
                event_metadata={
                    "invitation_id": str(invitation.id),
                    "email": email,
                    "role": membership_role.value,
                },
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

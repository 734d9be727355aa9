"""
Remove Member from Tenant Use Case
"""

from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, MembershipRole

from .dtos import RemoveMemberResponse


class RemoveMemberUseCase:
    """
    Use case for removing members from a tenant.

    Business Rules:
    - Caller is already authorized as admin or above for the tenant
    - The owner membership can never be removed
    - Membership row is deleted; an audit event keeps the history
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, target_user_id: UUID
    ) -> Result[RemoveMemberResponse]:
        async with self.uow:
            target_membership = await self.uow.memberships.get_by_user_and_tenant(
                target_user_id, tenant_id
            )
            if target_membership is None:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "User is not a member of this tenant")
                )

            if target_membership.role == MembershipRole.owner:
                return Return.err(
                    Error("CANNOT_MODIFY_OWNER", "The organization owner cannot be removed")
                )

            removed_role = target_membership.role.value
            await self.uow.memberships.delete(target_membership)

            audit = AuditEvent(
                tenant_id=tenant_id,
                user_id=actor_user_id,
                action="member_removed",
                event_metadata={
                    "removed_user_id": str(target_user_id),
                    "removed_user_role": removed_role,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(RemoveMemberResponse(status="removed"))

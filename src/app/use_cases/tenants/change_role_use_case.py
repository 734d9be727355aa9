"""
Change Member Role Use Case

Handles changing a member's role within a tenant.
"""

from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ASSIGNABLE_ROLES, AuditEvent, MembershipRole

from .dtos import ChangeRoleResponse, MembershipInfo


class ChangeRoleUseCase:
    """
    Use case for changing a member's role within a tenant.

    Business Rules:
    - Caller is already authorized as admin or above for the tenant
    - Only admin/member/viewer can be assigned; ownership is never granted
      through a role change
    - The owner membership cannot be changed
    - Target user must be a member
    - Creates audit event for compliance tracking
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, target_user_id: UUID, new_role: str
    ) -> Result[ChangeRoleResponse]:
        """
        Execute change role use case.

        Args:
            actor_user_id: User ID of the admin/owner making the change
            tenant_id: Tenant ID
            target_user_id: User ID whose role is being changed
            new_role: New role to assign (admin/member/viewer)

        Returns:
            Result with ChangeRoleResponse, or Error
        """
        try:
            membership_role = MembershipRole(new_role)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {new_role}. Must be one of: admin, member, viewer",
                )
            )

        if membership_role not in ASSIGNABLE_ROLES:
            return Return.err(
                Error("CANNOT_ASSIGN_OWNER", "The owner role cannot be assigned")
            )

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
                    Error("CANNOT_MODIFY_OWNER", "The owner's role cannot be changed")
                )

            old_role = target_membership.role.value

            target_membership.role = membership_role
            await self.uow.memberships.update(target_membership)

            audit = AuditEvent(
                tenant_id=tenant_id,
                user_id=actor_user_id,
                action="role_changed",
                event_metadata={
                    "target_user_id": str(target_user_id),
                    "old_role": old_role,
                    "new_role": membership_role.value,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                ChangeRoleResponse(
                    status="updated",
                    membership=MembershipInfo(
                        user_id=str(target_user_id), role=membership_role.value
                    ),
                )
            )

"""
List Members Use Case
"""

from typing import List
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import MembershipInfo


class ListMembersUseCase:
    """Lists the members of an already authorized tenant, oldest first."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> Result[List[MembershipInfo]]:
        async with self.uow:
            memberships = await self.uow.memberships.get_by_tenant_id(tenant_id)

            users = await self.uow.users.get_many(m.user_id for m in memberships)

            members = []
            for membership in memberships:
                user = users.get(membership.user_id)
                members.append(
                    MembershipInfo(
                        user_id=str(membership.user_id),
                        role=membership.role.value,
                        email=user.email if user else None,
                        joined_at=membership.created_at.isoformat(),
                    )
                )

            return Return.ok(members)

"""
Get Organization Use Case
"""

from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import MembershipRole

from .dtos import OrganizationInfo


class GetOrganizationUseCase:
    """Loads the organization summary for an already authorized caller."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, tenant_id: UUID, role: Optional[MembershipRole] = None
    ) -> Result[OrganizationInfo]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Organization not found"))

            return Return.ok(
                OrganizationInfo(
                    id=str(tenant.id),
                    name=tenant.name,
                    slug=tenant.slug,
                    plan_tier=tenant.plan_tier.value,
                    subscription_status=tenant.subscription_status.value,
                    role=role.value if role else None,
                )
            )

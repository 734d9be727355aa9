"""
Get Organization Stats Use Case
"""

from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import OrganizationStats


class GetOrganizationStatsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> Result[OrganizationStats]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Organization not found"))

            member_count = await self.uow.memberships.count_by_tenant_id(tenant_id)
            api_keys = await self.uow.api_keys.get_active_by_tenant_id(tenant_id)

            return Return.ok(
                OrganizationStats(
                    organization_id=str(tenant.id),
                    plan_tier=tenant.plan_tier.value,
                    member_count=member_count,
                    active_api_key_count=len(api_keys),
                )
            )

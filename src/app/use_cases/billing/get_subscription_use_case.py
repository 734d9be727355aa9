"""
Get Subscription Use Case
"""

from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.plans import PlanCatalog

from .dtos import SubscriptionInfo


class GetSubscriptionUseCase:
    def __init__(self, uow: UnitOfWork, plans: PlanCatalog):
        self.uow = uow
        self.plans = plans

    async def execute(self, tenant_id: UUID) -> Result[SubscriptionInfo]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Organization not found"))

            return Return.ok(
                SubscriptionInfo(
                    organization_id=str(tenant.id),
                    plan_tier=tenant.plan_tier.value,
                    subscription_status=tenant.subscription_status.value,
                    has_subscription=tenant.stripe_subscription_id is not None,
                    plan=self.plans.get(tenant.plan_tier),
                )
            )

"""
Create Portal Session Use Case

Opens the Stripe billing portal for an organization's billing account.
"""

import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.billing_gateway import BillingProviderError, IBillingGateway
from src.app.services.unit_of_work import UnitOfWork

from .dtos import PortalResponse

logger = logging.getLogger(__name__)


class CreatePortalSessionUseCase:
    """
    Business Rules:
    - Caller is already authorized as admin or above for the tenant
    - Only organizations with a Stripe customer have a billing account
    """

    def __init__(self, uow: UnitOfWork, gateway: IBillingGateway, app_base_url: str):
        self.uow = uow
        self.gateway = gateway
        self.app_base_url = app_base_url.rstrip("/")

    async def execute(self, tenant_id: UUID) -> Result[PortalResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Organization not found"))
            customer_id = tenant.stripe_customer_id

        if not customer_id:
            return Return.err(Error("NO_BILLING_ACCOUNT", "No billing account found"))

        try:
            session = await self.gateway.create_portal_session(
                customer_id=customer_id, return_url=f"{self.app_base_url}/billing"
            )
        except BillingProviderError as exc:
            logger.error(f"Portal session creation failed for {tenant_id}: {exc}")
            return Return.err(
                Error("BILLING_PROVIDER_ERROR", "Could not open the billing portal, try again later")
            )

        return Return.ok(PortalResponse(url=session.url))

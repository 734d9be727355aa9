"""
Cancel Subscription Use Case
"""

import logging
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.billing_gateway import BillingProviderError, IBillingGateway
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent

from .dtos import CancelSubscriptionCommand, CancelSubscriptionResponse

logger = logging.getLogger(__name__)


class CancelSubscriptionUseCase:
    """
    Use case for cancelling the organization's subscription.

    Business Rules:
    - Caller is already authorized as the owner of the tenant
    - Cancels at the end of the paid period unless `immediately` is set
    - Plan tier and status are left untouched; the provider's
      subscription webhooks apply the change
    - The request is audited
    """

    def __init__(self, uow: UnitOfWork, gateway: IBillingGateway):
        self.uow = uow
        self.gateway = gateway

    async def execute(
        self, user_id: UUID, tenant_id: UUID, command: CancelSubscriptionCommand
    ) -> Result[CancelSubscriptionResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Organization not found"))

            if not tenant.stripe_subscription_id:
                return Return.err(Error("NO_SUBSCRIPTION", "Organization has no subscription"))

            try:
                subscription = await self.gateway.cancel_subscription(
                    tenant.stripe_subscription_id, at_period_end=not command.immediately
                )
            except BillingProviderError as exc:
                logger.error(f"Subscription cancellation failed for {tenant.id}: {exc}")
                return Return.err(
                    Error("BILLING_PROVIDER_ERROR", "Could not cancel the subscription, try again later")
                )

            audit = AuditEvent(
                tenant_id=tenant.id,
                user_id=user_id,
                action="subscription_cancel_requested",
                event_metadata={
                    "subscription_id": subscription.id,
                    "immediately": command.immediately,
                },
            )
            await self.uow.audit_events.create(audit)
            await self.uow.commit()

            logger.info(
                f"Organization {tenant.id} requested cancellation of {subscription.id} "
                f"(immediately={command.immediately})"
            )
            return Return.ok(
                CancelSubscriptionResponse(
                    subscription_id=subscription.id,
                    subscription_status=subscription.status.value,
                    cancel_at_period_end=subscription.cancel_at_period_end,
                )
            )

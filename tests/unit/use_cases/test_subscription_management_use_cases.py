"""
Unit tests for CancelSubscriptionUseCase and CreatePortalSessionUseCase
"""
from uuid import uuid4
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.billing_gateway import (
    BillingProviderError,
    PortalSessionInfo,
    SubscriptionSnapshot,
)
from src.app.use_cases.billing import (
    CancelSubscriptionCommand,
    CancelSubscriptionUseCase,
    CreatePortalSessionUseCase,
)
from src.domain.entities import PlanTier, SubscriptionStatus, Tenant


@pytest.fixture
def tenant():
    return Tenant(
        id=uuid4(),
        name="Acme",
        slug="acme",
        plan_tier=PlanTier.pro,
        subscription_status=SubscriptionStatus.active,
        stripe_customer_id="cus_1",
        stripe_subscription_id="sub_1",
    )


@pytest.fixture
def gateway():
    gateway = MagicMock()
    gateway.cancel_subscription = AsyncMock(
        return_value=SubscriptionSnapshot(
            id="sub_1", status=SubscriptionStatus.active, cancel_at_period_end=True
        )
    )
    gateway.create_portal_session = AsyncMock(
        return_value=PortalSessionInfo(url="https://billing.stripe.test/cus_1")
    )
    return gateway


@pytest.mark.asyncio
async def test_cancel_at_period_end_by_default(mock_uow, gateway, tenant):
    mock_uow.tenants.get_by_id.return_value = tenant

    result = await CancelSubscriptionUseCase(mock_uow, gateway).execute(
        uuid4(), tenant.id, CancelSubscriptionCommand()
    )

    assert result.is_ok()
    assert result.value.cancel_at_period_end is True
    gateway.cancel_subscription.assert_called_once_with("sub_1", at_period_end=True)
    # Plan changes only through webhooks
    assert tenant.plan_tier == PlanTier.pro
    mock_uow.tenants.update.assert_not_called()
    audit = mock_uow.audit_events.create.call_args[0][0]
    assert audit.action == "subscription_cancel_requested"
    assert audit.event_metadata == {"subscription_id": "sub_1", "immediately": False}
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_cancel_without_subscription(mock_uow, gateway, tenant):
    tenant.stripe_subscription_id = None
    mock_uow.tenants.get_by_id.return_value = tenant

    result = await CancelSubscriptionUseCase(mock_uow, gateway).execute(
        uuid4(), tenant.id, CancelSubscriptionCommand(immediately=True)
    )

    assert result.error.code == "NO_SUBSCRIPTION"
    gateway.cancel_subscription.assert_not_called()


@pytest.mark.asyncio
async def test_cancel_provider_failure_is_not_audited(mock_uow, gateway, tenant):
    mock_uow.tenants.get_by_id.return_value = tenant
    gateway.cancel_subscription.side_effect = BillingProviderError("timeout")

    result = await CancelSubscriptionUseCase(mock_uow, gateway).execute(
        uuid4(), tenant.id, CancelSubscriptionCommand()
    )

    assert result.error.code == "BILLING_PROVIDER_ERROR"
    mock_uow.audit_events.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_portal_returns_to_billing_page(mock_uow, gateway, tenant):
    mock_uow.tenants.get_by_id.return_value = tenant

    result = await CreatePortalSessionUseCase(
        mock_uow, gateway, "https://app.example.com/"
    ).execute(tenant.id)

    assert result.value.url == "https://billing.stripe.test/cus_1"
    gateway.create_portal_session.assert_called_once_with(
        customer_id="cus_1", return_url="https://app.example.com/billing"
    )


@pytest.mark.asyncio
async def test_portal_without_customer(mock_uow, gateway, tenant):
    tenant.stripe_customer_id = None
    mock_uow.tenants.get_by_id.return_value = tenant

    result = await CreatePortalSessionUseCase(mock_uow, gateway, "https://app").execute(tenant.id)

    assert result.error.code == "NO_BILLING_ACCOUNT"
    gateway.create_portal_session.assert_not_called()

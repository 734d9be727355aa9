from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import (
    AuditEvent,
    MembershipRole,
    PlanTier,
    SubscriptionStatus,
    Tenant,
)
from tests.utils.factories import add_member, create_organization, create_user, session_headers


async def _subscribe(db_session, org_id: UUID) -> None:
    result = await db_session.exec(select(Tenant).where(Tenant.id == org_id))
    tenant = result.one()
    tenant.plan_tier = PlanTier.basic
    tenant.subscription_status = SubscriptionStatus.active
    tenant.stripe_customer_id = "cus_123"
    tenant.stripe_subscription_id = "sub_123"
    db_session.add(tenant)
    await db_session.commit()


@pytest.mark.asyncio
async def test_plans_are_public(client: AsyncClient):
    response = await client.get("/billing/plans")

    assert response.status_code == 200
    tiers = [plan["tier"] for plan in response.json()]
    assert tiers == ["free", "basic", "pro", "enterprise"]


@pytest.mark.asyncio
async def test_subscription_of_new_organization(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)

    response = await client.get("/billing/subscription", headers=session_headers(owner_id, org_id))

    assert response.status_code == 200
    data = response.json()
    assert data["plan_tier"] == "free"
    assert data["subscription_status"] == "none"
    assert data["has_subscription"] is False
    assert data["plan"]["limits"]["api_keys"] == 3


@pytest.mark.asyncio
async def test_checkout_carries_organization_id(client: AsyncClient, db_session, billing_gateway):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)

    response = await client.post(
        "/billing/checkout", json={"tier": "pro"}, headers=session_headers(owner_id, org_id)
    )

    assert response.status_code == 200
    assert response.json()["url"].startswith("https://checkout.stripe.test/")
    call = billing_gateway.checkout_calls[0]
    assert call["organization_id"] == str(org_id)
    assert call["price_id"] == "price_pro"


@pytest.mark.asyncio
async def test_checkout_requires_admin(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    member_id = await create_user(db_session, "member@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await add_member(db_session, member_id, org_id, MembershipRole.member)

    response = await client.post(
        "/billing/checkout", json={"tier": "basic"}, headers=session_headers(member_id, org_id)
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_enterprise_cannot_be_checked_out(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)

    response = await client.post(
        "/billing/checkout",
        json={"tier": "enterprise"},
        headers=session_headers(owner_id, org_id),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PLAN_NOT_AVAILABLE"


@pytest.mark.asyncio
async def test_cancel_is_reserved_to_the_owner(client: AsyncClient, db_session, billing_gateway):
    owner_id = await create_user(db_session, "owner@acme.com")
    admin_id = await create_user(db_session, "admin@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await add_member(db_session, admin_id, org_id, MembershipRole.admin)
    await _subscribe(db_session, org_id)

    denied = await client.post("/billing/cancel", headers=session_headers(admin_id, org_id))

    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "INSUFFICIENT_ROLE"
    assert billing_gateway.cancel_calls == []

    response = await client.post("/billing/cancel", headers=session_headers(owner_id, org_id))

    assert response.status_code == 200
    data = response.json()
    assert data["subscription_id"] == "sub_123"
    assert data["cancel_at_period_end"] is True
    assert billing_gateway.cancel_calls == [("sub_123", True)]


@pytest.mark.asyncio
async def test_cancel_leaves_plan_until_provider_confirms(
    client: AsyncClient, db_session, billing_gateway
):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await _subscribe(db_session, org_id)

    response = await client.post(
        "/billing/cancel",
        json={"immediately": True},
        headers=session_headers(owner_id, org_id),
    )

    assert response.status_code == 200
    assert response.json()["subscription_status"] == "canceled"
    assert billing_gateway.cancel_calls == [("sub_123", False)]

    subscription = await client.get(
        "/billing/subscription", headers=session_headers(owner_id, org_id)
    )
    assert subscription.json()["plan_tier"] == "basic"

    result = await db_session.exec(
        select(AuditEvent).where(AuditEvent.action == "subscription_cancel_requested")
    )
    assert len(result.all()) == 1


@pytest.mark.asyncio
async def test_cancel_without_subscription(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)

    response = await client.post("/billing/cancel", headers=session_headers(owner_id, org_id))

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "NO_SUBSCRIPTION"


@pytest.mark.asyncio
async def test_portal_requires_billing_account(client: AsyncClient, db_session, billing_gateway):
    owner_id = await create_user(db_session, "owner@acme.com")
    admin_id = await create_user(db_session, "admin@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await add_member(db_session, admin_id, org_id, MembershipRole.admin)

    missing = await client.post("/billing/portal", headers=session_headers(admin_id, org_id))

    assert missing.status_code == 409
    assert missing.json()["error"]["code"] == "NO_BILLING_ACCOUNT"

    await _subscribe(db_session, org_id)
    response = await client.post("/billing/portal", headers=session_headers(admin_id, org_id))

    assert response.status_code == 200
    assert response.json()["url"] == "https://billing.stripe.test/cus_123"
    assert billing_gateway.portal_calls[0][0] == "cus_123"


@pytest.mark.asyncio
async def test_portal_requires_admin(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    member_id = await create_user(db_session, "member@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await add_member(db_session, member_id, org_id, MembershipRole.member)

    response = await client.post("/billing/portal", headers=session_headers(member_id, org_id))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_ROLE"

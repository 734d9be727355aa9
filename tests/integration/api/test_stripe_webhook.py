import asyncio
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.billing import ProcessBillingWebhookUseCase
from src.domain.entities import AuditEvent, Tenant, WebhookEvent, WebhookEventStatus
from tests.utils.factories import (
    checkout_completed,
    create_organization,
    create_user,
    sign_payload,
    stripe_event,
    subscription_event,
)

WEBHOOK_URL = "/api/stripe/webhook"


async def _deliver(client: AsyncClient, payload: bytes):
    signature = sign_payload(payload, ApplicationConfig.STRIPE_WEBHOOK_SECRET)
    return await client.post(
        WEBHOOK_URL,
        content=payload,
        headers={"stripe-signature": signature, "content-type": "application/json"},
    )


async def _tenant(db_session, org_id: UUID) -> Tenant:
    result = await db_session.exec(select(Tenant).where(Tenant.id == org_id))
    tenant = result.one()
    await db_session.refresh(tenant)
    return tenant


async def _record(db_session, event_id: str) -> WebhookEvent:
    result = await db_session.exec(select(WebhookEvent).where(WebhookEvent.event_id == event_id))
    record = result.one()
    await db_session.refresh(record)
    return record


@pytest_asyncio.fixture
async def org_id(db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    return await create_organization(db_session, owner_id)


@pytest.mark.asyncio
async def test_missing_signature(client: AsyncClient):
    response = await client.post(WEBHOOK_URL, content=b"{}")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_SIGNATURE"


@pytest.mark.asyncio
async def test_invalid_signature(client: AsyncClient, org_id):
    payload = checkout_completed("evt_1", str(org_id))

    response = await client.post(
        WEBHOOK_URL,
        content=payload,
        headers={"stripe-signature": sign_payload(payload, "whsec_wrong")},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SIGNATURE"


@pytest.mark.asyncio
async def test_checkout_completed_upgrades_plan(client: AsyncClient, db_session, org_id):
    response = await _deliver(client, checkout_completed("evt_1", str(org_id)))

    assert response.status_code == 200
    assert response.json() == {"received": True}

    tenant = await _tenant(db_session, org_id)
    assert tenant.plan_tier.value == "basic"
    assert tenant.subscription_status.value == "active"
    assert tenant.stripe_customer_id == "cus_123"
    assert tenant.stripe_subscription_id == "sub_123"

    record = await _record(db_session, "evt_1")
    assert record.status == WebhookEventStatus.processed
    assert record.processed_at is not None


@pytest.mark.asyncio
async def test_duplicate_delivery_applies_once(client: AsyncClient, db_session, org_id):
    payload = checkout_completed("evt_dup", str(org_id))

    first = await _deliver(client, payload)
    second = await _deliver(client, payload)

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json() == {"received": True, "duplicate": True}

    result = await db_session.exec(
        select(AuditEvent).where(AuditEvent.action == "billing_state_changed")
    )
    assert len(result.all()) == 1


@pytest.mark.asyncio
async def test_checkout_then_subscription_deleted(client: AsyncClient, db_session, org_id):
    await _deliver(client, checkout_completed("evt_1", str(org_id), created=1_700_000_000))

    response = await _deliver(
        client,
        subscription_event(
            "evt_2", "customer.subscription.deleted", status="canceled", created=1_700_000_500
        ),
    )

    assert response.status_code == 200
    tenant = await _tenant(db_session, org_id)
    assert tenant.plan_tier.value == "free"
    assert tenant.subscription_status.value == "canceled"
    assert tenant.stripe_subscription_id is None


@pytest.mark.asyncio
async def test_subscription_updated_changes_tier_and_status(
    client: AsyncClient, db_session, org_id
):
    await _deliver(client, checkout_completed("evt_1", str(org_id), created=1_700_000_000))

    response = await _deliver(
        client,
        subscription_event(
            "evt_2",
            "customer.subscription.updated",
            status="past_due",
            price_id="price_pro",
            created=1_700_000_100,
        ),
    )

    assert response.status_code == 200
    tenant = await _tenant(db_session, org_id)
    assert tenant.plan_tier.value == "pro"
    assert tenant.subscription_status.value == "past_due"


@pytest.mark.asyncio
async def test_out_of_order_event_does_not_roll_back(client: AsyncClient, db_session, org_id):
    await _deliver(client, checkout_completed("evt_1", str(org_id), created=1_700_000_000))
    await _deliver(
        client,
        subscription_event(
            "evt_3", "customer.subscription.deleted", status="canceled", created=1_700_000_900
        ),
    )

    # older update arrives late
    response = await _deliver(
        client,
        subscription_event(
            "evt_2",
            "customer.subscription.updated",
            subscription_id="sub_123",
            status="active",
            organization_id=str(org_id),
            created=1_700_000_500,
        ),
    )

    assert response.status_code == 200
    tenant = await _tenant(db_session, org_id)
    assert tenant.subscription_status.value == "canceled"
    assert tenant.plan_tier.value == "free"
    assert (await _record(db_session, "evt_2")).status == WebhookEventStatus.processed


@pytest.mark.asyncio
async def test_update_for_other_subscription_is_ignored(client: AsyncClient, db_session, org_id):
    await _deliver(client, checkout_completed("evt_1", str(org_id), created=1_700_000_000))

    response = await _deliver(
        client,
        subscription_event(
            "evt_2",
            "customer.subscription.updated",
            subscription_id="sub_old",
            status="canceled",
            organization_id=str(org_id),
            created=1_700_000_100,
        ),
    )

    assert response.status_code == 200
    tenant = await _tenant(db_session, org_id)
    assert tenant.subscription_status.value == "active"
    assert tenant.stripe_subscription_id == "sub_123"


@pytest.mark.asyncio
async def test_checkout_without_organization_is_rejected(client: AsyncClient, db_session, org_id):
    response = await _deliver(client, checkout_completed("evt_orphan", None))

    assert response.status_code == 200
    record = await _record(db_session, "evt_orphan")
    assert record.status == WebhookEventStatus.rejected
    assert "organization" in record.error

    # rejected events are not retried
    again = await _deliver(client, checkout_completed("evt_orphan", None))
    assert again.json()["duplicate"] is True


@pytest.mark.asyncio
async def test_failure_is_recorded_and_retry_succeeds(
    client: AsyncClient, db_session, org_id, billing_gateway
):
    payload = checkout_completed("evt_retry", str(org_id))
    billing_gateway.fail_with = RuntimeError("stripe unavailable")

    failed = await _deliver(client, payload)

    assert failed.status_code == 500
    record = await _record(db_session, "evt_retry")
    assert record.status == WebhookEventStatus.failed
    assert record.retry_count == 1
    assert record.error == "stripe unavailable"
    assert (await _tenant(db_session, org_id)).plan_tier.value == "free"

    billing_gateway.fail_with = None
    retried = await _deliver(client, payload)

    assert retried.status_code == 200
    assert retried.json() == {"received": True}
    assert (await _record(db_session, "evt_retry")).status == WebhookEventStatus.processed
    assert (await _tenant(db_session, org_id)).plan_tier.value == "basic"


@pytest.mark.asyncio
async def test_invoice_events_only_audit(client: AsyncClient, db_session, org_id):
    await _deliver(client, checkout_completed("evt_1", str(org_id)))

    response = await _deliver(
        client,
        stripe_event(
            "evt_inv",
            "invoice.payment_failed",
            {"id": "in_1", "customer": "cus_123", "subscription": "sub_123", "amount_due": 29900},
        ),
    )

    assert response.status_code == 200
    result = await db_session.exec(
        select(AuditEvent).where(AuditEvent.action == "invoice_payment_failed")
    )
    audit = result.one()
    assert audit.event_metadata["amount_cents"] == 29900
    assert (await _tenant(db_session, org_id)).subscription_status.value == "active"


@pytest.mark.asyncio
async def test_unhandled_event_is_acknowledged(client: AsyncClient, db_session):
    response = await _deliver(
        client, stripe_event("evt_other", "customer.created", {"id": "cus_999"})
    )

    assert response.status_code == 200
    assert (await _record(db_session, "evt_other")).status == WebhookEventStatus.processed


@pytest.mark.asyncio
async def test_unknown_subscription_status_is_rejected(client: AsyncClient, db_session, org_id):
    payload = subscription_event(
        "evt_odd_status",
        "customer.subscription.updated",
        status="paused_forever",
        organization_id=str(org_id),
    )

    response = await _deliver(client, payload)

    assert response.status_code == 200
    record = await _record(db_session, "evt_odd_status")
    assert record.status == WebhookEventStatus.rejected
    assert (await _tenant(db_session, org_id)).plan_tier.value == "free"

    again = await _deliver(client, payload)
    assert again.json()["duplicate"] is True


@pytest.mark.asyncio
async def test_concurrent_deliveries_apply_once(engine, org_id, billing_gateway, plan_catalog):
    payload = checkout_completed("evt_race", str(org_id))
    signature = sign_payload(payload, ApplicationConfig.STRIPE_WEBHOOK_SECRET)
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def deliver():
        async with Session() as session:
            use_case = ProcessBillingWebhookUseCase(
                SqlAlchemyUnitOfWork(session), billing_gateway, plan_catalog
            )
            return await use_case.execute(payload, signature)

    results = await asyncio.gather(*(deliver() for _ in range(5)))

    assert all(result.is_ok() for result in results)
    assert sum(1 for result in results if not result.value.duplicate) == 1

    async with Session() as session:
        audits = await session.exec(
            select(AuditEvent).where(AuditEvent.action == "billing_state_changed")
        )
        assert len(audits.all()) == 1
        record = (
            await session.exec(select(WebhookEvent).where(WebhookEvent.event_id == "evt_race"))
        ).one()
        assert record.status == WebhookEventStatus.processed

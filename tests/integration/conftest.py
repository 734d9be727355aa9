import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.rate_limit_store import InMemoryRateLimitStore
from src.adapter.services.stripe_gateway import StripeBillingGateway
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.billing_gateway import (
    CheckoutSessionInfo,
    PortalSessionInfo,
    SubscriptionSnapshot,
)
from src.depends import (
    get_billing_gateway,
    get_clock,
    get_plan_catalog,
    get_rate_limit_store,
    get_unit_of_work,
)
from src.domain.entities import SubscriptionStatus
from src.domain.plans import PlanCatalog

# Start of a 5 minute window
FIXED_NOW = 1_700_000_100


class FakeClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeStripeGateway(StripeBillingGateway):
    """Real signature verification, canned Stripe API responses"""

    def __init__(self):
        super().__init__(
            secret_key="sk_test",
            webhook_secret=ApplicationConfig.STRIPE_WEBHOOK_SECRET,
            tolerance=300,
        )
        self.subscriptions = {
            "sub_123": SubscriptionSnapshot(
                id="sub_123",
                status=SubscriptionStatus.active,
                customer_id="cus_123",
                price_id="price_basic",
            )
        }
        self.fail_with = None
        self.checkout_calls = []
        self.portal_calls = []
        self.cancel_calls = []

    async def get_subscription(self, subscription_id: str) -> SubscriptionSnapshot:
        if self.fail_with is not None:
            raise self.fail_with
        return self.subscriptions[subscription_id]

    async def create_checkout_session(self, **kwargs) -> CheckoutSessionInfo:
        self.checkout_calls.append(kwargs)
        return CheckoutSessionInfo(id="cs_test_123", url="https://checkout.stripe.test/cs_test_123")

    async def create_portal_session(self, customer_id: str, return_url: str) -> PortalSessionInfo:
        self.portal_calls.append((customer_id, return_url))
        return PortalSessionInfo(url=f"https://billing.stripe.test/{customer_id}")

    async def cancel_subscription(
        self, subscription_id: str, at_period_end: bool = True
    ) -> SubscriptionSnapshot:
        if self.fail_with is not None:
            raise self.fail_with
        self.cancel_calls.append((subscription_id, at_period_end))
        snapshot = self.subscriptions[subscription_id]
        if at_period_end:
            return snapshot.model_copy(update={"cancel_at_period_end": True})
        return snapshot.model_copy(update={"status": SubscriptionStatus.canceled})


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock(FIXED_NOW)


@pytest.fixture
def billing_gateway():
    return FakeStripeGateway()


@pytest.fixture
def plan_catalog():
    return PlanCatalog(basic_price_id="price_basic", pro_price_id="price_pro")


@pytest_asyncio.fixture
async def client(db_session, clock, billing_gateway, plan_catalog):
    from src.api.app import create_app

    app = create_app(ApplicationConfig)
    rate_limit_store = InMemoryRateLimitStore(clock=clock)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_rate_limit_store] = lambda: rate_limit_store
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_billing_gateway] = lambda: billing_gateway
    app.dependency_overrides[get_plan_catalog] = lambda: plan_catalog

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

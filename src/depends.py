import time
from functools import lru_cache
from typing import Callable

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.rate_limit_store import InMemoryRateLimitStore, RedisRateLimitStore
from src.adapter.services.session_resolver import JwtSessionResolver
from src.adapter.services.stripe_gateway import StripeBillingGateway
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.billing_gateway import IBillingGateway
from src.app.services.rate_limit_store import IRateLimitStore
from src.app.services.session_resolver import ISessionResolver
from src.domain.plans import PlanCatalog

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_resources():
    # close the store only if a request created it
    if get_rate_limit_store.cache_info().currsize:
        await get_rate_limit_store().close()
        get_rate_limit_store.cache_clear()
    await engine.dispose()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache
def get_rate_limit_store() -> IRateLimitStore:
    if ApplicationConfig.CACHE_BACKEND == "memory":
        return InMemoryRateLimitStore()
    return RedisRateLimitStore.from_url(ApplicationConfig.REDIS_URL)


@lru_cache
def get_session_resolver() -> ISessionResolver:
    return JwtSessionResolver(ApplicationConfig.JWT_SECRET)


@lru_cache
def get_billing_gateway() -> IBillingGateway:
    return StripeBillingGateway(
        secret_key=ApplicationConfig.STRIPE_SECRET_KEY,
        webhook_secret=ApplicationConfig.STRIPE_WEBHOOK_SECRET,
        tolerance=ApplicationConfig.STRIPE_WEBHOOK_TOLERANCE,
    )


@lru_cache
def get_plan_catalog() -> PlanCatalog:
    return PlanCatalog(
        basic_price_id=ApplicationConfig.STRIPE_BASIC_PRICE_ID,
        pro_price_id=ApplicationConfig.STRIPE_PRO_PRICE_ID,
    )


def get_clock() -> Callable[[], float]:
    return time.time

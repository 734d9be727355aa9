"""
Tenant Entity

Represents an organization: the unit of data isolation and billing.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from .enums import PlanTier, SubscriptionStatus

if TYPE_CHECKING:
    from .membership import Membership


class Tenant(SQLModel, table=True):
    """
    Tenant entity - an organization workspace.

    Business Rules:
    - Each tenant has isolated data and billing
    - plan_tier and subscription_status are written only by the billing
      webhook processor, always together, from Stripe data
    - billing_event_at holds the provider timestamp of the last applied
      billing event; older events never roll the state back
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    slug: str = Field(max_length=100, unique=True)

    # Billing state (Stripe is the source of truth)
    plan_tier: PlanTier = Field(default=PlanTier.free)
    subscription_status: SubscriptionStatus = Field(default=SubscriptionStatus.none)
    stripe_customer_id: Optional[str] = Field(default=None, max_length=255)
    stripe_subscription_id: Optional[str] = Field(default=None, max_length=255)
    billing_event_at: Optional[int] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="tenant")

    __table_args__ = (
        Index("idx_tenant_stripe_subscription", "stripe_subscription_id"),
        Index("idx_tenant_stripe_customer", "stripe_customer_id"),
    )

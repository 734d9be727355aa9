"""
Plan Catalog

Subscription plans, their limits and the Stripe prices they map to.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel

from .entities.enums import PlanTier

logger = logging.getLogger(__name__)

UNLIMITED = -1


class PlanLimits(BaseModel):
    api_keys: int
    members: int


class Plan(BaseModel):
    tier: PlanTier
    name: str
    price_cents: Optional[int]  # None for custom pricing
    price_id: Optional[str] = None
    features: List[str]
    limits: PlanLimits
    is_custom: bool = False

    @property
    def checkout_available(self) -> bool:
        return self.price_id is not None


class PlanCatalog:
    """
    Immutable set of plans. Price ids come from configuration; a paid plan
    without a configured price id cannot be checked out.
    """

    def __init__(self, basic_price_id: Optional[str] = None, pro_price_id: Optional[str] = None):
        if not basic_price_id:
            logger.warning("STRIPE_BASIC_PRICE_ID not set, Basic plan is unavailable for checkout")
        if not pro_price_id:
            logger.warning("STRIPE_PRO_PRICE_ID not set, Pro plan is unavailable for checkout")

        self._plans: Dict[PlanTier, Plan] = {
            PlanTier.free: Plan(
                tier=PlanTier.free,
                name="Free",
                price_cents=0,
                features=["Up to 3 API keys", "Up to 2 team members", "Community support"],
                limits=PlanLimits(api_keys=3, members=2),
            ),
            PlanTier.basic: Plan(
                tier=PlanTier.basic,
                name="Basic",
                price_cents=29900,
                price_id=basic_price_id or None,
                features=[
                    "Up to 25 API keys",
                    "Up to 10 team members",
                    "Email support",
                    "Basic analytics",
                ],
                limits=PlanLimits(api_keys=25, members=10),
            ),
            PlanTier.pro: Plan(
                tier=PlanTier.pro,
                name="Pro",
                price_cents=49900,
                price_id=pro_price_id or None,
                features=[
                    "Unlimited API keys",
                    "Unlimited team members",
                    "Priority support",
                    "Advanced analytics",
                ],
                limits=PlanLimits(api_keys=UNLIMITED, members=UNLIMITED),
            ),
            PlanTier.enterprise: Plan(
                tier=PlanTier.enterprise,
                name="Enterprise",
                price_cents=None,
                features=["Everything in Pro", "Dedicated support", "SLA guarantee"],
                limits=PlanLimits(api_keys=UNLIMITED, members=UNLIMITED),
                is_custom=True,
            ),
        }

    def all(self) -> List[Plan]:
        return list(self._plans.values())

    def get(self, tier: PlanTier) -> Plan:
        return self._plans[tier]

    def get_by_price_id(self, price_id: Optional[str]) -> Optional[Plan]:
        if not price_id:
            return None
        for plan in self._plans.values():
            if plan.price_id == price_id:
                return plan
        return None

    @staticmethod
    def within_limit(limit: int, current: int) -> bool:
        """True when one more item fits under `limit`"""
        return limit == UNLIMITED or current < limit

"""
Access Core Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class MembershipRole(str, Enum):
    """
    Role of a user within an organization.

    Roles form a total order: owner > admin > member > viewer.
    Every authorization decision compares ranks, never role names.
    """

    owner = "owner"
    admin = "admin"
    member = "member"
    viewer = "viewer"

    @property
    def rank(self) -> int:
        return _ROLE_RANKS[self]

    def at_least(self, other: "MembershipRole") -> bool:
        return self.rank >= other.rank


_ROLE_RANKS = {
    MembershipRole.viewer: 1,
    MembershipRole.member: 2,
    MembershipRole.admin: 3,
    MembershipRole.owner: 4,
}

# Roles that can be granted through invitations or role changes.
# Ownership is assigned once, when the organization is created.
ASSIGNABLE_ROLES = (MembershipRole.admin, MembershipRole.member, MembershipRole.viewer)


class InvitationStatus(str, Enum):
    """Invitation status"""

    pending = "pending"
    accepted = "accepted"
    revoked = "revoked"


class PlanTier(str, Enum):
    """Subscription plan of an organization"""

    free = "free"
    basic = "basic"
    pro = "pro"
    enterprise = "enterprise"


class SubscriptionStatus(str, Enum):
    """Billing subscription status, mirrored from Stripe"""

    none = "none"
    trialing = "trialing"
    active = "active"
    incomplete = "incomplete"
    incomplete_expired = "incomplete_expired"
    past_due = "past_due"
    unpaid = "unpaid"
    paused = "paused"
    canceled = "canceled"


class WebhookEventStatus(str, Enum):
    """Processing state of a received webhook event"""

    processing = "processing"
    processed = "processed"
    failed = "failed"  # retryable
    rejected = "rejected"  # fatal, never retried

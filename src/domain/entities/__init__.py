"""
Access Core Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    ASSIGNABLE_ROLES,
    InvitationStatus,
    MembershipRole,
    PlanTier,
    SubscriptionStatus,
    WebhookEventStatus,
)

# Export all entities
from .user import User
from .tenant import Tenant
from .membership import Membership
from .invitation import Invitation
from .api_key import ApiKey
from .webhook_event import WebhookEvent
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "ASSIGNABLE_ROLES",
    "InvitationStatus",
    "MembershipRole",
    "PlanTier",
    "SubscriptionStatus",
    "WebhookEventStatus",
    # Entities
    "User",
    "Tenant",
    "Membership",
    "Invitation",
    "ApiKey",
    "WebhookEvent",
    "AuditEvent",
]

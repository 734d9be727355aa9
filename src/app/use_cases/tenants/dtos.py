"""
Tenant Use Case DTOs (Data Transfer Objects)

All Command and Response classes for tenant domain.
Provides type safety and clear contracts between layers.
"""

from typing import Optional

from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class CreateOrganizationCommand(BaseModel):
    name: str
    slug: str


# ============================================================================
# Response DTOs
# ============================================================================


class OrganizationInfo(BaseModel):
    """Organization summary visible to members"""

    id: str
    name: str
    slug: str
    plan_tier: str
    subscription_status: str
    role: Optional[str] = None


class MembershipInfo(BaseModel):
    user_id: str
    role: str
    email: Optional[str] = None
    joined_at: Optional[str] = None


class InviteUserResponse(BaseModel):
    """Response for invite user to tenant use case"""

    invite_id: str
    email: str
    role: str
    status: str
    token: str
    expires_at: str


class InvitationInfo(BaseModel):
    """Invitation as listed to members; never includes the token"""

    id: str
    email: str
    role: str
    status: str
    invited_by: str
    invited_by_email: Optional[str] = None
    created_at: str
    expires_at: str
    accepted_at: Optional[str] = None
    is_expired: bool
    is_pending: bool


class RevokeInvitationResponse(BaseModel):
    id: str
    status: str


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use case"""

    organization: OrganizationInfo


class ChangeRoleResponse(BaseModel):
    status: str
    membership: MembershipInfo


class OrganizationStats(BaseModel):
    """Usage counters exposed to machine clients"""

    organization_id: str
    plan_tier: str
    member_count: int
    active_api_key_count: int


class RemoveMemberResponse(BaseModel):
    """Response for remove member use case"""

    status: str

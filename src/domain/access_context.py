"""
Access Context

Uniform, request-scoped answer to "who is calling, for which tenant, with
what authority". Produced by the session context resolver or the API key
authenticator and threaded explicitly through every call.
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import List, Optional
from uuid import UUID

from .entities.enums import MembershipRole
from .rate_limit import RateLimitDecision


class AccessLevel(IntEnum):
    """
    Guard levels of the authorization chain, weakest first.

    Each level includes every requirement of the levels below it.
    """

    public = 0
    authenticated = 1
    tenant_scoped = 2
    admin_or_above = 3
    owner_only = 4

    @property
    def minimum_role(self) -> Optional[MembershipRole]:
        """Lowest membership role satisfying this level (None below tenant_scoped)"""
        return _MINIMUM_ROLES.get(self)


_MINIMUM_ROLES = {
    AccessLevel.tenant_scoped: MembershipRole.viewer,
    AccessLevel.admin_or_above: MembershipRole.admin,
    AccessLevel.owner_only: MembershipRole.owner,
}


@dataclass(frozen=True)
class ApiKeyIdentity:
    """Authenticated machine credential attached to an access context"""

    key_id: UUID
    name: str
    scopes: List[str] = field(default_factory=list)

    def allows(self, scope: str) -> bool:
        return "*" in self.scopes or scope in self.scopes


@dataclass(frozen=True)
class AccessContext:
    """
    Resolved caller identity.

    tenant_selector is the raw x-organization-id header value. tenant_id is
    set only when the selector parsed; role is None when the caller has no
    membership in that tenant.
    """

    principal_id: Optional[UUID] = None
    tenant_selector: Optional[str] = None
    tenant_id: Optional[UUID] = None
    role: Optional[MembershipRole] = None
    api_key: Optional[ApiKeyIdentity] = None
    rate_limit: Optional[RateLimitDecision] = None

    @property
    def is_anonymous(self) -> bool:
        return self.principal_id is None and self.api_key is None

    def with_rate_limit(self, decision: RateLimitDecision) -> "AccessContext":
        return replace(self, rate_limit=decision)

"""
Authorization Chain

Guards are evaluated weakest first and stop at the first failure:
Public -> Authenticated -> TenantScoped -> AdminOrAbove -> OwnerOnly.
"""

from src.libs.result import Error, Result, Return
from src.domain.access_context import AccessContext, AccessLevel

UNAUTHENTICATED = "UNAUTHENTICATED"
ORGANIZATION_ID_REQUIRED = "ORGANIZATION_ID_REQUIRED"
INVALID_ORGANIZATION_ID = "INVALID_ORGANIZATION_ID"
ORGANIZATION_ACCESS_DENIED = "ORGANIZATION_ACCESS_DENIED"
INSUFFICIENT_ROLE = "INSUFFICIENT_ROLE"


def authorize(context: AccessContext, level: AccessLevel) -> Result[AccessContext]:
    """
    Check `context` against every guard up to `level`.

    A missing tenant selector is a malformed request (BadRequest), while a
    selector naming a tenant the caller does not belong to is a denial
    (Forbidden); tenant existence is never revealed.
    """
    if level >= AccessLevel.authenticated and context.principal_id is None:
        return Return.err(Error(UNAUTHENTICATED, "Authentication required"))

    if level >= AccessLevel.tenant_scoped:
        if not context.tenant_selector:
            return Return.err(
                Error(ORGANIZATION_ID_REQUIRED, "Missing x-organization-id header")
            )
        if context.tenant_id is None:
            return Return.err(
                Error(INVALID_ORGANIZATION_ID, "Invalid x-organization-id header")
            )
        if context.role is None:
            return Return.err(
                Error(ORGANIZATION_ACCESS_DENIED, "Access denied to organization")
            )

        minimum_role = level.minimum_role
        if not context.role.at_least(minimum_role):
            return Return.err(
                Error(
                    INSUFFICIENT_ROLE,
                    f"Role '{context.role.value}' is insufficient, "
                    f"'{minimum_role.value}' or above required",
                )
            )

    return Return.ok(context)

"""
Resolve Access Context Use Case

Resolves the caller of a session-authenticated request and, when a tenant
selector is present, their membership in that tenant.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.session_resolver import ISessionResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.access_context import AccessContext

logger = logging.getLogger(__name__)


class ResolveAccessContextUseCase:
    """
    Use case for building the AccessContext of a session request.

    Business Rules:
    - Invalid or expired session -> anonymous context, never an error here;
      the first guard that needs a principal rejects the request
    - Selector without membership -> tenant_id set, role None (Forbidden
      later, not Not Found)
    - Malformed selector -> tenant_id None, selector kept (BadRequest later)
    - Read-only
    """

    def __init__(self, uow: UnitOfWork, session_resolver: ISessionResolver):
        self.uow = uow
        self.session_resolver = session_resolver

    async def execute(
        self, session_credential: Optional[str], tenant_selector: Optional[str]
    ) -> AccessContext:
        """
        Execute resolve context use case.

        Args:
            session_credential: Opaque session token (cookie or bearer), if any
            tenant_selector: Raw x-organization-id header value, if any

        Returns:
            AccessContext for the request
        """
        principal_id = None
        if session_credential:
            principal_id = await self.session_resolver.resolve(session_credential)

        if principal_id is None:
            return AccessContext(tenant_selector=tenant_selector)

        if not tenant_selector:
            return AccessContext(principal_id=principal_id)

        try:
            tenant_id = UUID(tenant_selector)
        except ValueError:
            return AccessContext(principal_id=principal_id, tenant_selector=tenant_selector)

        async with self.uow:
            membership = await self.uow.memberships.get_by_user_and_tenant(
                principal_id, tenant_id
            )
            role = membership.role if membership else None

        if role is None:
            logger.info(f"User {principal_id} has no membership in tenant {tenant_id}")

        return AccessContext(
            principal_id=principal_id,
            tenant_selector=tenant_selector,
            tenant_id=tenant_id,
            role=role,
        )

"""
Create Organization Use Case

Creates a tenant and makes the caller its owner.
"""

import re
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, Membership, MembershipRole, Tenant

from .dtos import CreateOrganizationCommand, OrganizationInfo

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class CreateOrganizationUseCase:
    """
    Use case for creating an organization.

    Business Rules:
    - Slug is lowercase alphanumeric with single dashes, unique
    - Creator receives the single owner membership
    - New organizations start on the free plan with no subscription
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, creator_user_id: UUID, command: CreateOrganizationCommand
    ) -> Result[OrganizationInfo]:
        slug = command.slug.strip().lower()
        if not SLUG_PATTERN.match(slug):
            return Return.err(
                Error("INVALID_SLUG", "Slug may contain lowercase letters, digits and dashes")
            )

        async with self.uow:
            creator = await self.uow.users.get_by_id(creator_user_id)
            if creator is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if await self.uow.tenants.get_by_slug(slug):
                return Return.err(Error("SLUG_TAKEN", "Organization slug is already taken"))

            tenant = await self.uow.tenants.create(Tenant(name=command.name, slug=slug))

            membership = Membership(
                user_id=creator_user_id,
                tenant_id=tenant.id,
                role=MembershipRole.owner,
            )
            await self.uow.memberships.create(membership)

            audit = AuditEvent(
                tenant_id=tenant.id,
                user_id=creator_user_id,
                action="organization_created",
                event_metadata={"name": tenant.name, "slug": tenant.slug},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                OrganizationInfo(
                    id=str(tenant.id),
                    name=tenant.name,
                    slug=tenant.slug,
                    plan_tier=tenant.plan_tier.value,
                    subscription_status=tenant.subscription_status.value,
                    role=MembershipRole.owner.value,
                )
            )

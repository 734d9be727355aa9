"""
Create API Key Use Case

Issues a new machine credential for a tenant.
"""

from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.api_key_secrets import generate_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ApiKey, AuditEvent
from src.domain.plans import PlanCatalog

from .dtos import CreateApiKeyCommand, CreateApiKeyResponse

# Scopes understood by the public API
KNOWN_SCOPES = ("organization:read", "members:read", "stats:read")
ALL_SCOPES = "*"


class CreateApiKeyUseCase:
    """
    Use case for creating an API key.

    Business Rules:
    - Only known scopes (or "*") may be granted; no scopes requested means
      all known scopes
    - Active key count is limited by the tenant's plan
    - The full key is returned once; only its bcrypt hash is stored
    - Expiration must be in the future
    """

    def __init__(
        self,
        uow: UnitOfWork,
        plans: PlanCatalog,
        key_prefix: str,
        hash_rounds: int = 10,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.uow = uow
        self.plans = plans
        self.key_prefix = key_prefix
        self.hash_rounds = hash_rounds
        self.clock = clock

    async def execute(
        self, creator_user_id: UUID, tenant_id: UUID, command: CreateApiKeyCommand
    ) -> Result[CreateApiKeyResponse]:
        scopes = command.scopes if command.scopes else list(KNOWN_SCOPES)
        unknown = [s for s in scopes if s != ALL_SCOPES and s not in KNOWN_SCOPES]
        if unknown:
            return Return.err(
                Error("INVALID_SCOPE", f"Unknown scopes: {', '.join(unknown)}")
            )

        expires_at = command.expires_at
        if expires_at is not None and expires_at.tzinfo is not None:
            expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Organization not found"))

            if expires_at is not None and expires_at <= self.clock():
                return Return.err(
                    Error("INVALID_EXPIRATION", "Expiration must be in the future")
                )

            active_keys = await self.uow.api_keys.get_active_by_tenant_id(tenant_id)
            plan = self.plans.get(tenant.plan_tier)
            if not self.plans.within_limit(plan.limits.api_keys, len(active_keys)):
                return Return.err(
                    Error(
                        "PLAN_LIMIT_REACHED",
                        f"The {plan.name} plan allows up to {plan.limits.api_keys} API keys",
                    )
                )

            generated = generate_api_key(self.key_prefix, self.hash_rounds)

            api_key = ApiKey(
                tenant_id=tenant_id,
                name=command.name,
                description=command.description,
                key_prefix=generated.key_prefix,
                key_lookup=generated.key_lookup,
                key_hash=generated.key_hash,
                scopes=scopes,
                expires_at=expires_at,
                created_by=creator_user_id,
            )
            api_key = await self.uow.api_keys.create(api_key)

            audit = AuditEvent(
                tenant_id=tenant_id,
                user_id=creator_user_id,
                action="api_key_created",
                event_metadata={
                    "api_key_id": str(api_key.id),
                    "name": api_key.name,
                    "scopes": scopes,
                },
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                CreateApiKeyResponse(
                    id=str(api_key.id),
                    name=api_key.name,
                    description=api_key.description,
                    key_prefix=api_key.key_prefix,
                    masked_key=api_key.masked(),
                    scopes=scopes,
                    expires_at=api_key.expires_at,
                    created_at=api_key.created_at,
                    key=generated.key,
                )
            )

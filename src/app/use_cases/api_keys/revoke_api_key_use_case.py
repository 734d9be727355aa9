"""
Revoke API Key Use Case

Permanently disables an API key.
"""

from datetime import datetime
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent

from .dtos import RevokeApiKeyResponse


class RevokeApiKeyUseCase:
    """
    Use case for revoking an API key.

    Business Rules:
    - Key must belong to the caller's tenant; keys of other tenants are
      reported as not found
    - Revocation is terminal: is_active=False and revoked_at set
    - Revoking an already revoked key fails with API_KEY_NOT_FOUND
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, revoker_user_id: UUID, tenant_id: UUID, key_id: UUID
    ) -> Result[RevokeApiKeyResponse]:
        async with self.uow:
            api_key = await self.uow.api_keys.get_by_id(key_id)

            if (
                api_key is None
                or api_key.tenant_id != tenant_id
                or not api_key.is_active
                or api_key.revoked_at is not None
            ):
                return Return.err(
                    Error("API_KEY_NOT_FOUND", "API key not found or already revoked")
                )

            now = datetime.utcnow()
            api_key.is_active = False
            api_key.revoked_at = now
            api_key.revoked_by = revoker_user_id
            api_key.updated_at = now
            await self.uow.api_keys.update(api_key)

            audit = AuditEvent(
                tenant_id=tenant_id,
                user_id=revoker_user_id,
                action="api_key_revoked",
                event_metadata={"api_key_id": str(api_key.id), "name": api_key.name},
            )
            await self.uow.audit_events.create(audit)

            await self.uow.commit()

            return Return.ok(
                RevokeApiKeyResponse(id=str(api_key.id), name=api_key.name, status="revoked")
            )

"""
List API Keys Use Case
"""

from typing import List
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import ApiKeyInfo


class ListApiKeysUseCase:
    """Lists the active API keys of a tenant, newest first. Secrets are never returned."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> Result[List[ApiKeyInfo]]:
        async with self.uow:
            keys = await self.uow.api_keys.get_active_by_tenant_id(tenant_id)

            return Return.ok(
                [
                    ApiKeyInfo(
                        id=str(key.id),
                        name=key.name,
                        description=key.description,
                        key_prefix=key.key_prefix,
                        masked_key=key.masked(),
                        scopes=list(key.scopes or []),
                        expires_at=key.expires_at,
                        last_used_at=key.last_used_at,
                        created_at=key.created_at,
                    )
                    for key in keys
                ]
            )

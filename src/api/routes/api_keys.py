from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.utils.access import require_access
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.api_keys import (
    ApiKeyInfo,
    CreateApiKeyCommand,
    CreateApiKeyResponse,
    CreateApiKeyUseCase,
    ListApiKeysUseCase,
    RevokeApiKeyResponse,
    RevokeApiKeyUseCase,
)
from src.depends import get_plan_catalog, get_unit_of_work
from src.domain.access_context import AccessContext, AccessLevel
from src.domain.plans import PlanCatalog

router = APIRouter(prefix="/api-keys", tags=["API Keys"])


class CreateApiKeyRequest(BaseModel):
    """
    Create API key HTTP request payload

    Scopes default to every public API scope when omitted.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    scopes: Optional[List[str]] = Field(None, description="e.g. organization:read")
    expires_at: Optional[datetime] = Field(None, description="Optional expiry (UTC)")


@router.get("", response_model=List[ApiKeyInfo])
async def list_api_keys(
    context: AccessContext = Depends(require_access(AccessLevel.tenant_scoped)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Active API keys of the selected organization, secrets masked"""
    use_case = ListApiKeysUseCase(uow)
    result = await use_case.execute(context.tenant_id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreateApiKeyResponse)
async def create_api_key(
    request: CreateApiKeyRequest,
    context: AccessContext = Depends(require_access(AccessLevel.admin_or_above)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    """
    Create API Key

    The full key is returned once in this response and cannot be retrieved later.

    Raises:
        - 400 Bad Request: INVALID_SCOPE, INVALID_EXPIRATION
        - 403 Forbidden: caller is below admin, PLAN_LIMIT_REACHED
    """
    use_case = CreateApiKeyUseCase(
        uow,
        plans,
        key_prefix=ApplicationConfig.API_KEY_PREFIX,
        hash_rounds=ApplicationConfig.API_KEY_HASH_ROUNDS,
    )
    result = await use_case.execute(
        context.principal_id,
        context.tenant_id,
        CreateApiKeyCommand(**request.model_dump()),
    )

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_SCOPE", "INVALID_EXPIRATION"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "PLAN_LIMIT_REACHED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.delete("/{key_id}", response_model=RevokeApiKeyResponse)
async def revoke_api_key(
    key_id: UUID,
    context: AccessContext = Depends(require_access(AccessLevel.admin_or_above)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke API Key

    Revocation is immediate and permanent.

    Raises:
        - 403 Forbidden: caller is below admin
        - 404 Not Found: API_KEY_NOT_FOUND
    """
    use_case = RevokeApiKeyUseCase(uow)
    result = await use_case.execute(context.principal_id, context.tenant_id, key_id)

    if result.is_err():
        error = result.error
        if error.code == "API_KEY_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value

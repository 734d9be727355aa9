"""
Public API (v1)

Machine endpoints authenticated by API key. Each endpoint declares the
scope it needs and its own rate limit.
"""

from fastapi import APIRouter, Depends, status

from src.api.error import ClientError, ServerError
from src.api.utils.api_key_auth import require_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.tenants import (
    GetOrganizationStatsUseCase,
    GetOrganizationUseCase,
    ListMembersUseCase,
)
from src.depends import get_unit_of_work
from src.domain.access_context import AccessContext
from src.domain.rate_limit import RateLimitRule

router = APIRouter(prefix="/organizations", tags=["Public API"])


@router.get("/current")
async def get_organization(
    context: AccessContext = Depends(
        require_api_key("organization:read", RateLimitRule(requests=100, window="1h"))
    ),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetOrganizationUseCase(uow).execute(context.tenant_id)

    if result.is_err():
        error = result.error
        if error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return {"organization": result.value.model_dump(exclude_none=True)}


@router.get("/members")
async def list_members(
    context: AccessContext = Depends(
        require_api_key("members:read", RateLimitRule(requests=50, window="1h"))
    ),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListMembersUseCase(uow).execute(context.tenant_id)

    if result.is_err():
        raise ServerError(result.error)

    return {"members": [member.model_dump() for member in result.value]}


@router.get("/stats")
async def get_stats(
    context: AccessContext = Depends(
        require_api_key("stats:read", RateLimitRule(requests=10, window="5m"))
    ),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetOrganizationStatsUseCase(uow).execute(context.tenant_id)

    if result.is_err():
        error = result.error
        if error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return {"stats": result.value.model_dump()}

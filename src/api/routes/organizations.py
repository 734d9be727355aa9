from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.utils.access import require_access
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.tenants import (
    ChangeRoleResponse,
    ChangeRoleUseCase,
    CreateOrganizationCommand,
    CreateOrganizationUseCase,
    GetOrganizationUseCase,
    ListMembersUseCase,
    MembershipInfo,
    OrganizationInfo,
    RemoveMemberResponse,
    RemoveMemberUseCase,
)
from src.depends import get_unit_of_work
from src.domain.access_context import AccessContext, AccessLevel

router = APIRouter(prefix="/organizations", tags=["Organizations"])


class CreateOrganizationRequest(BaseModel):
    """Create organization HTTP request payload"""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=2, max_length=100)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=OrganizationInfo)
async def create_organization(
    request: CreateOrganizationRequest,
    context: AccessContext = Depends(require_access(AccessLevel.authenticated)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Organization

    Creates a new organization; the caller becomes its owner.

    Raises:
        - 400 Bad Request: INVALID_SLUG
        - 401 Unauthorized: no valid session
        - 404 Not Found: USER_NOT_FOUND
        - 409 Conflict: SLUG_TAKEN
    """
    use_case = CreateOrganizationUseCase(uow)
    result = await use_case.execute(
        context.principal_id,
        CreateOrganizationCommand(name=request.name, slug=request.slug),
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_SLUG":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "SLUG_TAKEN":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.get("/current", response_model=OrganizationInfo)
async def get_current_organization(
    context: AccessContext = Depends(require_access(AccessLevel.tenant_scoped)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Organization selected by the x-organization-id header"""
    use_case = GetOrganizationUseCase(uow)
    result = await use_case.execute(context.tenant_id, context.role)

    if result.is_err():
        error = result.error
        if error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get("/current/members", response_model=List[MembershipInfo])
async def list_members(
    context: AccessContext = Depends(require_access(AccessLevel.tenant_scoped)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = ListMembersUseCase(uow)
    result = await use_case.execute(context.tenant_id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ChangeRoleRequest(BaseModel):
    """Change member role HTTP request payload"""

    role: str = Field(..., description="New role (admin/member/viewer)")


@router.put("/current/members/{user_id}", response_model=ChangeRoleResponse)
async def change_member_role(
    user_id: UUID,
    request: ChangeRoleRequest,
    context: AccessContext = Depends(require_access(AccessLevel.admin_or_above)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change Member Role

    Requires admin or owner role in the selected organization.

    Raises:
        - 400 Bad Request: INVALID_ROLE
        - 403 Forbidden: caller is below admin
        - 404 Not Found: MEMBERSHIP_NOT_FOUND
        - 409 Conflict: CANNOT_MODIFY_OWNER, CANNOT_ASSIGN_OWNER
    """
    use_case = ChangeRoleUseCase(uow)
    result = await use_case.execute(
        context.principal_id, context.tenant_id, user_id, request.role
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_ROLE":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "MEMBERSHIP_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in ("CANNOT_MODIFY_OWNER", "CANNOT_ASSIGN_OWNER"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.delete("/current/members/{user_id}", response_model=RemoveMemberResponse)
async def remove_member(
    user_id: UUID,
    context: AccessContext = Depends(require_access(AccessLevel.admin_or_above)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Remove Member

    Raises:
        - 403 Forbidden: caller is below admin
        - 404 Not Found: MEMBERSHIP_NOT_FOUND
        - 409 Conflict: CANNOT_MODIFY_OWNER
    """
    use_case = RemoveMemberUseCase(uow)
    result = await use_case.execute(context.principal_id, context.tenant_id, user_id)

    if result.is_err():
        error = result.error
        if error.code == "MEMBERSHIP_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "CANNOT_MODIFY_OWNER":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value

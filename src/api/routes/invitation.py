from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.api.utils.access import require_access
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.tenants import (
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    InvitationInfo,
    InviteUserResponse,
    InviteUserUseCase,
    ListInvitationsUseCase,
    ResendInvitationUseCase,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
)
from src.depends import get_plan_catalog, get_unit_of_work
from src.domain.access_context import AccessContext, AccessLevel
from src.domain.plans import PlanCatalog

router = APIRouter(prefix="/invitations", tags=["Invitations"])


class InviteUserRequest(BaseModel):
    """
    Invite user HTTP request payload

    Validates incoming request for inviting a user to the selected organization.
    """

    email: EmailStr = Field(..., description="Email address to invite")
    role: str = Field(..., description="Role to assign (admin/member/viewer)")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InviteUserResponse)
async def invite_user(
    request: InviteUserRequest,
    context: AccessContext = Depends(require_access(AccessLevel.admin_or_above)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    """
    Invite User to Organization

    Requires admin or owner role in the selected organization.

    Raises:
        - 400 Bad Request: INVALID_ROLE
        - 403 Forbidden: caller is below admin, PLAN_LIMIT_REACHED
        - 409 Conflict: INVITE_ALREADY_EXISTS or ALREADY_MEMBER
    """
    use_case = InviteUserUseCase(uow, plans)
    result = await use_case.execute(
        context.principal_id, context.tenant_id, request.email, request.role
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_ROLE":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "PLAN_LIMIT_REACHED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in ("INVITE_ALREADY_EXISTS", "ALREADY_MEMBER"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.post("/{token}/accept", response_model=AcceptInvitationResponse)
async def accept_invitation(
    token: str,
    context: AccessContext = Depends(require_access(AccessLevel.authenticated)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    """
    Accept Invitation

    The signed-in user joins the inviting organization with the invited role.

    Raises:
        - 400 Bad Request: INVITATION_EXPIRED
        - 403 Forbidden: INVITATION_EMAIL_MISMATCH, PLAN_LIMIT_REACHED
        - 404 Not Found: INVALID_TOKEN
        - 409 Conflict: INVITATION_ALREADY_ACCEPTED, INVITATION_REVOKED, ALREADY_MEMBER
    """
    use_case = AcceptInvitationUseCase(uow, plans)
    result = await use_case.execute(context.principal_id, token)

    if result.is_err():
        error = result.error
        if error.code == "INVITATION_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in ("INVITATION_EMAIL_MISMATCH", "PLAN_LIMIT_REACHED"):
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code in ("INVALID_TOKEN", "USER_NOT_FOUND", "TENANT_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in (
            "INVITATION_ALREADY_ACCEPTED",
            "INVITATION_REVOKED",
            "ALREADY_MEMBER",
        ):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.get("", response_model=List[InvitationInfo])
async def list_invitations(
    context: AccessContext = Depends(require_access(AccessLevel.tenant_scoped)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Invitations

    Any member of the selected organization can see its invitations.
    Tokens are never included.
    """
    use_case = ListInvitationsUseCase(uow)
    result = await use_case.execute(context.tenant_id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.delete("/{invitation_id}", response_model=RevokeInvitationResponse)
async def revoke_invitation(
    invitation_id: UUID,
    context: AccessContext = Depends(require_access(AccessLevel.admin_or_above)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke Invitation

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_ALREADY_ACCEPTED, INVITATION_REVOKED
    """
    use_case = RevokeInvitationUseCase(uow)
    result = await use_case.execute(context.principal_id, context.tenant_id, invitation_id)

    if result.is_err():
        error = result.error
        if error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in ("INVITATION_ALREADY_ACCEPTED", "INVITATION_REVOKED"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.post("/{invitation_id}/resend", response_model=InviteUserResponse)
async def resend_invitation(
    invitation_id: UUID,
    context: AccessContext = Depends(require_access(AccessLevel.admin_or_above)),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Resend Invitation

    Expired invitations get a fresh expiration; the token stays the same.

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_ALREADY_ACCEPTED, INVITATION_REVOKED, INVITE_ALREADY_EXISTS
    """
    use_case = ResendInvitationUseCase(uow)
    result = await use_case.execute(context.principal_id, context.tenant_id, invitation_id)

    if result.is_err():
        error = result.error
        if error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code in (
            "INVITATION_ALREADY_ACCEPTED",
            "INVITATION_REVOKED",
            "INVITE_ALREADY_EXISTS",
        ):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value

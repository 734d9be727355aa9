"""
Session Access Guards

FastAPI dependencies that resolve the caller of a session request and run
the authorization chain up to a required level.
"""

from typing import Optional

from fastapi import Depends, Header, Request, status

from config import ApplicationConfig
from src.api.error import ClientError
from src.app.services.authorization import (
    INSUFFICIENT_ROLE,
    INVALID_ORGANIZATION_ID,
    ORGANIZATION_ACCESS_DENIED,
    ORGANIZATION_ID_REQUIRED,
    UNAUTHENTICATED,
    authorize,
)
from src.app.services.session_resolver import ISessionResolver
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.access import ResolveAccessContextUseCase
from src.depends import get_session_resolver, get_unit_of_work
from src.domain.access_context import AccessContext, AccessLevel

_STATUS_BY_CODE = {
    UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ORGANIZATION_ID_REQUIRED: status.HTTP_400_BAD_REQUEST,
    INVALID_ORGANIZATION_ID: status.HTTP_400_BAD_REQUEST,
    ORGANIZATION_ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    INSUFFICIENT_ROLE: status.HTTP_403_FORBIDDEN,
}


def session_credential(request: Request) -> Optional[str]:
    """Session token from the session cookie, else from a bearer header"""
    cookie = request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)
    if cookie:
        return cookie
    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return None


async def get_access_context(
    request: Request,
    x_organization_id: Optional[str] = Header(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    session_resolver: ISessionResolver = Depends(get_session_resolver),
) -> AccessContext:
    use_case = ResolveAccessContextUseCase(uow, session_resolver)
    return await use_case.execute(session_credential(request), x_organization_id)


def require_access(level: AccessLevel):
    """
    Dependency factory for session routes.

    Usage:
        context: AccessContext = Depends(require_access(AccessLevel.admin_or_above))
    """

    async def dependency(
        context: AccessContext = Depends(get_access_context),
    ) -> AccessContext:
        result = authorize(context, level)
        if result.is_err():
            error = result.error
            raise ClientError(error, status_code=_STATUS_BY_CODE[error.code])
        return result.value

    return dependency

"""
API Key Authentication

Dependency factory for machine routes: authenticates the bearer API key,
checks the endpoint scope and applies the endpoint rate limit.
"""

from typing import Callable, Optional

from fastapi import Depends, Request, Response, status

from config import ApplicationConfig
from src.api.error import ClientError
from src.app.services.rate_limit_store import IRateLimitStore
from src.app.services.rate_limiter import FixedWindowRateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.access import AuthenticateApiKeyUseCase
from src.depends import get_clock, get_rate_limit_store, get_unit_of_work
from src.domain.access_context import AccessContext
from src.domain.rate_limit import RateLimitRule
from src.libs.result import Error


def bearer_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def require_api_key(scope: str, rate_limit: RateLimitRule):
    """
    Usage:
        context: AccessContext = Depends(
            require_api_key("members:read", RateLimitRule(requests=50, window="1h"))
        )

    Rate limiting runs only after authentication and the scope check pass.
    Rate limit headers are set on every authenticated response.
    """

    async def dependency(
        request: Request,
        response: Response,
        uow: UnitOfWork = Depends(get_unit_of_work),
        store: IRateLimitStore = Depends(get_rate_limit_store),
        clock: Callable[[], float] = Depends(get_clock),
    ) -> AccessContext:
        use_case = AuthenticateApiKeyUseCase(uow, ApplicationConfig.API_KEY_PREFIX)
        result = await use_case.execute(bearer_token(request))
        if result.is_err():
            raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)

        context = result.value
        if not context.api_key.allows(scope):
            raise ClientError(
                Error("INSUFFICIENT_SCOPE", f"API key is missing the '{scope}' scope"),
                status_code=status.HTTP_403_FORBIDDEN,
            )

        limiter = FixedWindowRateLimiter(store, clock)
        decision = await limiter.hit(context.api_key.key_id, rate_limit)
        headers = decision.headers()

        if not decision.allowed:
            headers["Retry-After"] = str(max(decision.reset_at - int(clock()), 1))
            raise ClientError(
                Error("RATE_LIMIT_EXCEEDED", f"Rate limit exceeded. {rate_limit.describe()}"),
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers=headers,
            )

        response.headers.update(headers)
        return context.with_rate_limit(decision)

    return dependency

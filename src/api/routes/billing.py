from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.utils.access import require_access
from src.app.services.billing_gateway import IBillingGateway
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.billing import (
    CancelSubscriptionCommand,
    CancelSubscriptionResponse,
    CancelSubscriptionUseCase,
    CheckoutResponse,
    CreateCheckoutCommand,
    CreateCheckoutSessionUseCase,
    CreatePortalSessionUseCase,
    PortalResponse,
    GetSubscriptionUseCase,
    ListPlansUseCase,
    SubscriptionInfo,
)
from src.depends import get_billing_gateway, get_plan_catalog, get_unit_of_work
from src.domain.access_context import AccessContext, AccessLevel
from src.domain.plans import Plan, PlanCatalog

router = APIRouter(prefix="/billing", tags=["Billing"])


@router.get("/plans", response_model=List[Plan])
async def list_plans(plans: PlanCatalog = Depends(get_plan_catalog)):
    """Public plan catalog"""
    result = await ListPlansUseCase(plans).execute()
    return result.value


@router.get("/subscription", response_model=SubscriptionInfo)
async def get_subscription(
    context: AccessContext = Depends(require_access(AccessLevel.tenant_scoped)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    use_case = GetSubscriptionUseCase(uow, plans)
    result = await use_case.execute(context.tenant_id)

    if result.is_err():
        error = result.error
        if error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class CheckoutRequest(BaseModel):
    tier: str = Field(..., description="Plan to subscribe to (basic/pro)")


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout_session(
    request: CheckoutRequest,
    context: AccessContext = Depends(require_access(AccessLevel.admin_or_above)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    gateway: IBillingGateway = Depends(get_billing_gateway),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    """
    Create Checkout Session

    Returns the hosted checkout URL. The plan changes only once the billing
    provider confirms payment through the webhook.

    Raises:
        - 400 Bad Request: INVALID_PLAN, PLAN_NOT_AVAILABLE
        - 403 Forbidden: caller is below admin
        - 409 Conflict: ALREADY_SUBSCRIBED
        - 502 Bad Gateway: BILLING_PROVIDER_ERROR
    """
    use_case = CreateCheckoutSessionUseCase(
        uow, gateway, plans, app_base_url=ApplicationConfig.APP_BASE_URL
    )
    result = await use_case.execute(
        context.principal_id, context.tenant_id, CreateCheckoutCommand(tier=request.tier)
    )

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_PLAN", "PLAN_NOT_AVAILABLE"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "ALREADY_SUBSCRIBED":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "BILLING_PROVIDER_ERROR":
            raise ClientError(error, status_code=status.HTTP_502_BAD_GATEWAY)
        raise ServerError(error)

    return result.value


@router.post("/portal", response_model=PortalResponse)
async def create_portal_session(
    context: AccessContext = Depends(require_access(AccessLevel.admin_or_above)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    gateway: IBillingGateway = Depends(get_billing_gateway),
):
    """
    Create Billing Portal Session

    Raises:
        - 403 Forbidden: caller is below admin
        - 409 Conflict: NO_BILLING_ACCOUNT
        - 502 Bad Gateway: BILLING_PROVIDER_ERROR
    """
    use_case = CreatePortalSessionUseCase(
        uow, gateway, app_base_url=ApplicationConfig.APP_BASE_URL
    )
    result = await use_case.execute(context.tenant_id)

    if result.is_err():
        error = result.error
        if error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "NO_BILLING_ACCOUNT":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "BILLING_PROVIDER_ERROR":
            raise ClientError(error, status_code=status.HTTP_502_BAD_GATEWAY)
        raise ServerError(error)

    return result.value


class CancelSubscriptionRequest(BaseModel):
    immediately: bool = Field(False, description="Cancel now instead of at period end")


@router.post("/cancel", response_model=CancelSubscriptionResponse)
async def cancel_subscription(
    request: Optional[CancelSubscriptionRequest] = None,
    context: AccessContext = Depends(require_access(AccessLevel.owner_only)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    gateway: IBillingGateway = Depends(get_billing_gateway),
):
    """
    Cancel Subscription

    Owner only. The plan changes when the provider confirms the cancellation
    through the subscription webhooks.

    Raises:
        - 403 Forbidden: caller is not the owner
        - 409 Conflict: NO_SUBSCRIPTION
        - 502 Bad Gateway: BILLING_PROVIDER_ERROR
    """
    use_case = CancelSubscriptionUseCase(uow, gateway)
    result = await use_case.execute(
        context.principal_id,
        context.tenant_id,
        CancelSubscriptionCommand(immediately=request.immediately if request else False),
    )

    if result.is_err():
        error = result.error
        if error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "NO_SUBSCRIPTION":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "BILLING_PROVIDER_ERROR":
            raise ClientError(error, status_code=status.HTTP_502_BAD_GATEWAY)
        raise ServerError(error)

    return result.value

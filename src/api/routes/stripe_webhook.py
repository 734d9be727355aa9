from fastapi import APIRouter, Depends, Request, status

from src.api.error import ClientError, ServerError
from src.app.services.billing_gateway import IBillingGateway
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.billing import ProcessBillingWebhookUseCase
from src.depends import get_billing_gateway, get_plan_catalog, get_unit_of_work
from src.domain.plans import PlanCatalog
from src.libs.result import Error

router = APIRouter(prefix="/stripe", tags=["Billing"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    gateway: IBillingGateway = Depends(get_billing_gateway),
    plans: PlanCatalog = Depends(get_plan_catalog),
):
    """
    Stripe Webhook

    Authenticated by the stripe-signature header only. Duplicate deliveries
    are acknowledged without being applied again.

    Raises:
        - 400 Bad Request: MISSING_SIGNATURE, INVALID_SIGNATURE, INVALID_PAYLOAD
        - 500 Internal Server Error: processing failed, Stripe retries
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    use_case = ProcessBillingWebhookUseCase(uow, gateway, plans)
    try:
        result = await use_case.execute(payload, signature)
    except Exception as exc:
        raise ServerError(Error("WEBHOOK_PROCESSING_FAILED", str(exc))) from exc

    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_400_BAD_REQUEST)

    return result.value.model_dump(exclude_none=True)

"""Payment gateway webhook routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ...application.use_cases.process_payment_webhook import ProcessPaymentWebhookUseCase
from ...api.dependencies import get_unit_of_work, get_order_lifecycle, get_payment_service
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.order_lifecycle import OrderLifecycle
from ...infrastructure.external_services.payment_service import (
    PaymentService,
    WebhookNotConfiguredError,
    WebhookSignatureError,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    payment_service: PaymentService = Depends(get_payment_service),
):
    """Stripe webhook endpoint for payment events.

    Handles payment_intent.succeeded, payment_intent.payment_failed and
    charge.refunded. Once the signature checks out the response is always
    200, otherwise Stripe keeps retrying the delivery.
    """
    payload = await request.body()
    signature = request.headers.get("Stripe-Signature")

    try:
        event = payment_service.parse_webhook_event(payload, signature)
    except WebhookNotConfiguredError as e:
        logger.error("%s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook secret not configured"
        )
    except WebhookSignatureError as e:
        logger.warning("Rejected Stripe webhook: %s", e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if event is not None:
        use_case = ProcessPaymentWebhookUseCase(unit_of_work, lifecycle)
        await use_case.execute(event)

    return {"received": True}

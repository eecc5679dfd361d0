from fastapi import APIRouter, Depends, HTTPException, Request
from app.config import settings
from app.core.dependencies import Principal, require_permission, client_ip
from app.database.supabase_client import get_supabase
from app.modules.payments.schemas import (
    PaymentIntentRequest, PaymentIntentResponse, ConfirmPaymentRequest, ConfirmPaymentResponse
)
from app.modules.payments.service import PaymentService
from app.modules.payments.stripe_gateway import StripeGateway
from supabase import Client

router = APIRouter(tags=["payments"])


def get_stripe_gateway() -> StripeGateway:
    if not settings.stripe_secret_key:
        raise HTTPException(status_code=503, detail="Payments are not configured")
    return StripeGateway(settings.stripe_secret_key)


def get_payment_service(
    supabase: Client = Depends(get_supabase),
    gateway: StripeGateway = Depends(get_stripe_gateway)
) -> PaymentService:
    return PaymentService(supabase, gateway)


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    data: PaymentIntentRequest,
    principal: Principal = Depends(require_permission("ai_agents.buy_credits")),
    service: PaymentService = Depends(get_payment_service)
):
    """Start a Stripe payment for a number of AI credits"""
    return service.create_payment_intent(principal.id, data.credits)


@router.post("/confirm-payment", response_model=ConfirmPaymentResponse)
async def confirm_payment(
    request: Request,
    data: ConfirmPaymentRequest,
    principal: Principal = Depends(require_permission("ai_agents.buy_credits")),
    service: PaymentService = Depends(get_payment_service)
):
    """Add the credits of a succeeded payment to the caller's balance"""
    return service.confirm_payment(principal.id, data.payment_intent_id, client_ip(request))

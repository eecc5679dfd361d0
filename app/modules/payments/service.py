from supabase import Client
from app.config import settings
from app.modules.activity.service import ActivityService
from app.modules.payments.schemas import PaymentIntentResponse, ConfirmPaymentResponse
from app.modules.payments.stripe_gateway import StripeGateway
from typing import Optional
from fastapi import HTTPException
import logging
import stripe

logger = logging.getLogger(__name__)


class PaymentService:
    """Sells AI credits through Stripe payment intents"""

    def __init__(self, supabase: Client, gateway: StripeGateway):
        self.supabase = supabase
        self.gateway = gateway
        self.activity = ActivityService(supabase)

    def create_payment_intent(self, user_id: int, credits: int) -> PaymentIntentResponse:
        amount = credits * settings.credit_price_cents
        try:
            intent = self.gateway.create_payment_intent(
                amount=amount,
                currency=settings.stripe_currency,
                metadata={"user_id": str(user_id), "credits": str(credits)},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe refused payment intent for user {user_id}: {e}")
            raise HTTPException(status_code=502, detail="Payment provider error")
        logger.info(f"Payment intent {intent['id']} created for user {user_id} ({credits} credits)")
        return PaymentIntentResponse(
            client_secret=intent["client_secret"],
            payment_intent_id=intent["id"],
            amount=intent["amount"],
            currency=intent["currency"],
        )

    def confirm_payment(
        self,
        user_id: int,
        payment_intent_id: str,
        ip_address: Optional[str] = None
    ) -> ConfirmPaymentResponse:
        """
        Credit a succeeded payment to its owner. Recording the purchase and
        adding the credits happen in one SQL transaction keyed by the payment
        intent, so a failed attempt can be retried and a repeated one adds nothing.
        """
        try:
            intent = self.gateway.retrieve_payment_intent(payment_intent_id)
        except stripe.StripeError as e:
            logger.warning(f"Could not retrieve payment intent {payment_intent_id}: {e}")
            raise HTTPException(status_code=400, detail="Invalid payment intent")

        if intent["status"] != "succeeded":
            raise HTTPException(status_code=400, detail="Payment not completed")
        if intent["metadata"].get("user_id") != str(user_id):
            logger.warning(f"User {user_id} tried to confirm payment {payment_intent_id} of another user")
            raise HTTPException(status_code=403, detail="Payment belongs to another user")

        try:
            credits = int(intent["metadata"].get("credits", 0))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid payment metadata")

        try:
            result = self.supabase.rpc("confirm_credit_purchase", {
                "p_payment_intent_id": payment_intent_id,
                "p_user_id": user_id,
                "p_credits": credits,
                "p_amount": intent["amount"],
                "p_currency": intent["currency"]
            }).execute()
        except Exception as e:
            logger.error(f"Error crediting purchase {payment_intent_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to confirm payment")
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")

        outcome = result.data[0]
        if outcome["already_processed"]:
            logger.info(f"Payment {payment_intent_id} already processed")
            return ConfirmPaymentResponse(already_processed=True, credits_added=0, ai_credits=outcome["ai_credits"])

        self.activity.log(
            user_id,
            "ai_credits_purchased",
            {"payment_intent_id": payment_intent_id, "credits": credits, "amount": intent["amount"]},
            ip_address
        )
        logger.info(f"User {user_id} bought {credits} credits ({payment_intent_id})")
        return ConfirmPaymentResponse(credits_added=credits, ai_credits=outcome["ai_credits"])

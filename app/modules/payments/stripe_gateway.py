"""
Thin wrapper over the Stripe client so the payment flow can be exercised
without network access.
"""

from typing import Any, Dict
import stripe


class StripeGateway:
    def __init__(self, api_key: str):
        self.api_key = api_key

    @staticmethod
    def _as_dict(intent) -> Dict[str, Any]:
        return {
            "id": intent["id"],
            "client_secret": intent["client_secret"],
            "amount": intent["amount"],
            "currency": intent["currency"],
            "status": intent["status"],
            "metadata": dict(intent["metadata"] or {}),
        }

    def create_payment_intent(self, amount: int, currency: str, metadata: Dict[str, str]) -> Dict[str, Any]:
        intent = stripe.PaymentIntent.create(
            amount=amount,
            currency=currency,
            metadata=metadata,
            automatic_payment_methods={"enabled": True},
            api_key=self.api_key,
        )
        return self._as_dict(intent)

    def retrieve_payment_intent(self, payment_intent_id: str) -> Dict[str, Any]:
        return self._as_dict(stripe.PaymentIntent.retrieve(payment_intent_id, api_key=self.api_key))

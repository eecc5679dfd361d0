from pydantic import BaseModel, Field


class PaymentIntentRequest(BaseModel):
    credits: int = Field(gt=0, le=100000)


class PaymentIntentResponse(BaseModel):
    client_secret: str
    payment_intent_id: str
    amount: int
    currency: str


class ConfirmPaymentRequest(BaseModel):
    payment_intent_id: str = Field(min_length=1)


class ConfirmPaymentResponse(BaseModel):
    success: bool = True
    already_processed: bool = False
    credits_added: int
    ai_credits: int

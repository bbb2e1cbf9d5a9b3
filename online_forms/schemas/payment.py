# online_forms/schemas/payment.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, Any
from datetime import datetime
from uuid import UUID


class CreateOrderRequest(BaseModel):
    user_application_id: UUID
    amount: float = Field(..., gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class VerifyPaymentRequest(BaseModel):
    payment_id: UUID
    gateway_payment_id: str = Field(..., min_length=1)
    gateway_order_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


class PaymentSummary(BaseModel):
    id: str
    amount: float
    status: str
    paid_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PaymentResponse(BaseModel):
    id: str
    user_id: str
    amount: float
    currency: str
    status: str
    payment_gateway: str
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="payment_metadata")
    paid_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    refund_amount: Optional[float] = None
    refund_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, title="PaymentResponse")


class GatewayOrder(BaseModel):
    id: str
    amount: int
    currency: str

# online_forms/models/payment.py
from sqlalchemy import Column, String, DateTime, Numeric, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid

from online_forms.database import Base
from online_forms.models.enums import PaymentStatus


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default="INR", nullable=False)
    status = Column(String(20), default=PaymentStatus.pending.value, nullable=False, index=True)  # pending, completed, failed, refunded
    payment_gateway = Column(String(20), nullable=False, index=True)  # razorpay, stripe, paypal
    gateway_order_id = Column(String(100), nullable=True, index=True)
    gateway_payment_id = Column(String(100), nullable=True, index=True)
    gateway_signature = Column(String(255), nullable=True)
    description = Column(String(255), nullable=True)

    # Holds the originating user_application_id until verification links it
    payment_metadata = Column(JSON, nullable=True)

    paid_at = Column(DateTime(timezone=True), nullable=True)
    refunded_at = Column(DateTime(timezone=True), nullable=True)
    refund_amount = Column(Numeric(10, 2), nullable=True)
    refund_reason = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="payments")
    applications = relationship("UserApplication", back_populates="payment")

    @property
    def user_application_id(self):
        return (self.payment_metadata or {}).get("user_application_id")

    def __repr__(self):
        return f"<Payment {self.gateway_order_id}: {self.amount} {self.currency} - {self.status}>"

# online_forms/services/payment_service.py
import logging
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from online_forms.config import settings
from online_forms.models.enums import PaymentGateway, PaymentStatus
from online_forms.models.payment import Payment
from online_forms.models.user import User
from online_forms.models.user_application import UserApplication
from online_forms.services.gateway import CAPTURED_STATUS, GatewayError, RazorpayGateway
from online_forms.utils.errors import AppError, ConflictError, NotFoundError, UpstreamError
from online_forms.utils.pagination import paginate

logger = logging.getLogger(__name__)


def to_minor_units(amount) -> int:
    """99.00 -> 9900"""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1")))


def create_order(db: Session, gateway: RazorpayGateway, user: User, user_application_id: str,
                 amount: float, currency: Optional[str] = None):
    """Open a gateway order for a submission and persist the pending Payment."""
    submission = db.query(UserApplication).filter(
        UserApplication.id == user_application_id,
        UserApplication.user_id == user.id
    ).first()
    if not submission:
        raise NotFoundError("User application not found")

    if submission.payment and submission.payment.status == PaymentStatus.completed.value:
        raise ConflictError("Payment already completed for this application")

    if amount is None or amount <= 0:
        raise AppError("Amount must be greater than zero")

    currency = (currency or settings.DEFAULT_CURRENCY).upper()
    if currency not in settings.SUPPORTED_CURRENCIES:
        raise AppError(f"Unsupported currency {currency}")

    application_title = submission.application.title if submission.application else ""
    receipt = f"receipt_{submission.id}_{int(time.time() * 1000)}"

    try:
        order = gateway.create_order(
            amount=to_minor_units(amount),
            currency=currency,
            receipt=receipt,
            notes={
                "user_application_id": submission.id,
                "application_title": application_title,
            },
        )
    except GatewayError as e:
        logger.error(f"❌ Order creation failed for {submission.tracking_number}: {str(e)}")
        raise UpstreamError("Failed to create payment order")

    payment = Payment(
        user_id=user.id,
        amount=amount,
        currency=currency,
        status=PaymentStatus.pending.value,
        payment_gateway=PaymentGateway.razorpay.value,
        gateway_order_id=order["id"],
        description=f"Payment for {application_title}",
        payment_metadata={
            "user_application_id": submission.id,
            "razorpay_order_id": order["id"],
        },
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)

    logger.info(f"💳 Payment {payment.id} opened with order {order['id']} for {submission.tracking_number}")
    return payment, order


def _mark_failed(db: Session, payment: Payment, reason: str):
    payment.status = PaymentStatus.failed.value
    db.commit()
    logger.warning(f"❌ Payment {payment.id} marked failed: {reason}")


def verify_payment(db: Session, gateway: RazorpayGateway, user: User, payment_id: str,
                   gateway_payment_id: str, gateway_order_id: str, signature: str) -> Payment:
    """
    Reconcile a client-reported payment against the gateway.

    A bad signature leaves the payment pending so the genuine callback can
    still succeed. A captured payment completes the Payment and links the
    submission in the same commit.
    """
    payment = db.query(Payment).filter(
        Payment.id == payment_id,
        Payment.user_id == user.id,
        Payment.status == PaymentStatus.pending.value
    ).first()
    if not payment:
        raise NotFoundError("Payment not found or already processed")

    if gateway_order_id != payment.gateway_order_id:
        logger.warning(f"Payment {payment.id} belongs to order {payment.gateway_order_id}, not {gateway_order_id}")
        raise AppError("Invalid payment signature")

    if not gateway.verify_signature(gateway_order_id, gateway_payment_id, signature):
        logger.warning(f"Invalid signature for payment {payment.id} (order {gateway_order_id})")
        raise AppError("Invalid payment signature")

    try:
        gateway_payment = gateway.fetch_payment(gateway_payment_id)
    except GatewayError as e:
        _mark_failed(db, payment, str(e))
        raise AppError("Payment verification failed")

    if gateway_payment.get("status") != CAPTURED_STATUS:
        _mark_failed(db, payment, f"gateway status {gateway_payment.get('status')}")
        raise AppError("Payment verification failed")

    if gateway_payment.get("order_id") != payment.gateway_order_id:
        _mark_failed(db, payment, f"gateway payment is for order {gateway_payment.get('order_id')}")
        raise AppError("Payment verification failed")

    payment.status = PaymentStatus.completed.value
    payment.gateway_payment_id = gateway_payment_id
    payment.gateway_signature = signature
    payment.paid_at = datetime.now(timezone.utc)

    submission_id = payment.user_application_id
    if submission_id:
        submission = db.query(UserApplication).filter(UserApplication.id == submission_id).first()
        if submission:
            submission.payment_id = payment.id
            submission.amount_paid = payment.amount
        else:
            logger.warning(f"Payment {payment.id} references missing submission {submission_id}")

    db.commit()
    db.refresh(payment)
    logger.info(f"✅ Payment {payment.id} completed ({gateway_payment_id})")
    return payment


def payment_history(db: Session, user: User, page: int, limit: int, payment_status: Optional[str] = None):
    query = db.query(Payment).filter(Payment.user_id == user.id)
    if payment_status:
        query = query.filter(Payment.status == payment_status)
    return paginate(query.order_by(Payment.created_at.desc()), page, limit)


def get_payment(db: Session, user: User, payment_id: str) -> Payment:
    payment = db.query(Payment).filter(
        Payment.id == payment_id,
        Payment.user_id == user.id
    ).first()
    if not payment:
        raise NotFoundError("Payment not found")
    return payment

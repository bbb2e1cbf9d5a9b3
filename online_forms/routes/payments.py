# online_forms/routes/payments.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from online_forms.auth.dependencies import get_current_user
from online_forms.config import settings
from online_forms.database import get_db
from online_forms.models.enums import PaymentStatus
from online_forms.models.user import User
from online_forms.models.user_application import UserApplication
from online_forms.schemas.application import ApplicationSummary
from online_forms.schemas.payment import CreateOrderRequest, GatewayOrder, PaymentResponse, VerifyPaymentRequest
from online_forms.services import payment_service
from online_forms.services.gateway import RazorpayGateway, get_payment_gateway
from online_forms.utils.pagination import pagination_meta
from online_forms.utils.responses import success_response

router = APIRouter(prefix="/payments", tags=["Payments"])


def _with_submissions(db: Session, payment) -> dict:
    body = PaymentResponse.model_validate(payment).model_dump(mode="json")
    submissions = db.query(UserApplication).filter(UserApplication.payment_id == payment.id).all()
    body["user_applications"] = [
        {
            "id": s.id,
            "tracking_number": s.tracking_number,
            "status": s.status,
            "application": ApplicationSummary.model_validate(s.application).model_dump(mode="json"),
        }
        for s in submissions
    ]
    return body


@router.post("/create-order", status_code=status.HTTP_201_CREATED)
def create_order(
    data: CreateOrderRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway)
):
    payment, order = payment_service.create_order(
        db, gateway, current_user, str(data.user_application_id), data.amount, data.currency
    )
    return success_response({
        "payment": PaymentResponse.model_validate(payment),
        "order": GatewayOrder(id=order["id"], amount=order["amount"], currency=order["currency"]),
        "key_id": settings.RAZORPAY_KEY_ID,
    })


@router.post("/verify")
def verify_payment(
    data: VerifyPaymentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway)
):
    payment = payment_service.verify_payment(
        db,
        gateway,
        current_user,
        str(data.payment_id),
        data.gateway_payment_id,
        data.gateway_order_id,
        data.signature,
    )
    return success_response({"payment": PaymentResponse.model_validate(payment)}, "Payment verified successfully")


@router.get("/history")
def payment_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    rows, total = payment_service.payment_history(
        db, current_user, page, limit, status_filter.value if status_filter else None
    )
    return success_response({
        "payments": [_with_submissions(db, p) for p in rows],
        "pagination": pagination_meta(page, limit, total),
    })


@router.get("/{payment_id}")
def get_payment(
    payment_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    payment = payment_service.get_payment(db, current_user, payment_id)
    return success_response({"payment": _with_submissions(db, payment)})

# online_forms/services/analytics_service.py
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from online_forms.models.application import Application
from online_forms.models.enums import PaymentStatus, SubmissionStatus, UserRole
from online_forms.models.payment import Payment
from online_forms.models.user import User
from online_forms.models.user_application import UserApplication

logger = logging.getLogger(__name__)


def _money(value) -> float:
    return float(value or 0)


def _since(days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def dashboard_stats(db: Session) -> dict:
    last_month = _since(30)

    total_revenue = db.query(func.sum(Payment.amount)).filter(
        Payment.status == PaymentStatus.completed.value
    ).scalar()

    stats = {
        "total_users": db.query(User).filter(User.role == UserRole.user.value).count(),
        "total_applications": db.query(Application).filter(Application.is_active == True).count(),  # noqa: E712
        "total_submissions": db.query(UserApplication).count(),
        "pending_submissions": db.query(UserApplication).filter(
            UserApplication.status == SubmissionStatus.pending.value).count(),
        "completed_submissions": db.query(UserApplication).filter(
            UserApplication.status == SubmissionStatus.completed.value).count(),
        "total_revenue": _money(total_revenue),
        "new_users_this_month": db.query(User).filter(
            User.role == UserRole.user.value,
            User.created_at >= last_month
        ).count(),
        "submissions_this_month": db.query(UserApplication).filter(
            UserApplication.created_at >= last_month).count(),
    }

    recent_submissions = db.query(UserApplication).options(
        joinedload(UserApplication.user),
        joinedload(UserApplication.application)
    ).order_by(UserApplication.created_at.desc()).limit(10).all()

    return {"stats": stats, "recent_submissions": recent_submissions}


def overview(db: Session, period: int = 30) -> dict:
    start = _since(period)

    user_day = func.date(User.created_at)
    user_growth = db.query(user_day.label("date"), func.count(User.id).label("count")).filter(
        User.created_at >= start,
        User.role == UserRole.user.value
    ).group_by(user_day).order_by(user_day.asc()).all()

    submission_day = func.date(UserApplication.submitted_at)
    submission_trends = db.query(
        submission_day.label("date"), func.count(UserApplication.id).label("count")
    ).filter(
        UserApplication.submitted_at >= start
    ).group_by(submission_day).order_by(submission_day.asc()).all()

    category_stats = db.query(Application.category, func.count(Application.id)).filter(
        Application.is_active == True  # noqa: E712
    ).group_by(Application.category).all()

    status_distribution = db.query(UserApplication.status, func.count(UserApplication.id)).group_by(
        UserApplication.status
    ).all()

    return {
        "user_growth": [{"date": str(d), "count": c} for d, c in user_growth],
        "submission_trends": [{"date": str(d), "count": c} for d, c in submission_trends],
        "category_stats": [{"category": cat, "count": c} for cat, c in category_stats],
        "status_distribution": [{"status": s, "count": c} for s, c in status_distribution],
    }


def popular_applications(db: Session, limit: int = 10) -> list:
    submission_count = func.count(UserApplication.id)
    rows = db.query(
        Application.id, Application.title, Application.category, submission_count.label("submission_count")
    ).join(
        UserApplication, UserApplication.application_id == Application.id
    ).group_by(
        Application.id, Application.title, Application.category
    ).order_by(submission_count.desc()).limit(limit).all()

    return [
        {
            "submission_count": count,
            "application": {"id": app_id, "title": title, "category": category},
        }
        for app_id, title, category, count in rows
    ]


def payment_analytics(db: Session, period: int = 30) -> dict:
    start = _since(period)
    completed = Payment.status == PaymentStatus.completed.value

    paid_day = func.date(Payment.paid_at)
    revenue_over_time = db.query(
        paid_day.label("date"),
        func.sum(Payment.amount).label("revenue"),
        func.count(Payment.id).label("transactions")
    ).filter(
        completed,
        Payment.paid_at >= start
    ).group_by(paid_day).order_by(paid_day.asc()).all()

    payment_methods = db.query(
        Payment.payment_gateway, func.count(Payment.id), func.sum(Payment.amount)
    ).filter(completed).group_by(Payment.payment_gateway).all()

    total_revenue = db.query(func.sum(Payment.amount)).filter(completed).scalar()
    average_payment = db.query(func.avg(Payment.amount)).filter(completed).scalar()

    return {
        "revenue_over_time": [
            {"date": str(d), "revenue": _money(revenue), "transactions": transactions}
            for d, revenue, transactions in revenue_over_time
        ],
        "payment_methods": [
            {"payment_gateway": gateway, "count": count, "total": _money(total)}
            for gateway, count, total in payment_methods
        ],
        "total_revenue": _money(total_revenue),
        "average_payment": round(_money(average_payment), 2),
    }

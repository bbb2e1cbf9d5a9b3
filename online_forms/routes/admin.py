# online_forms/routes/admin.py
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session, joinedload, selectinload
from typing import Optional
import logging

from online_forms.auth.dependencies import get_current_admin
from online_forms.database import get_db
from online_forms.models.enums import ApplicationCategory, SubmissionStatus, SubmissionType, UserRole
from online_forms.models.user import User
from online_forms.models.user_application import UserApplication
from online_forms.schemas.application import ApplicationCreate, ApplicationDetail, ApplicationUpdate
from online_forms.schemas.payment import PaymentSummary
from online_forms.schemas.user import UserResponse, UserStatusUpdate, UserSummary
from online_forms.schemas.user_application import (
    AdminUserApplicationDetail,
    AdminUserApplicationResponse,
    StatusUpdateRequest,
    UserApplicationResponse,
)
from online_forms.services import analytics_service, catalog_service, email_service
from online_forms.services.submission_service import SubmissionService
from online_forms.utils.errors import NotFoundError
from online_forms.utils.pagination import order_clause, paginate, pagination_meta
from online_forms.utils.responses import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(get_current_admin)])

SUBMISSION_SORT_FIELDS = {"submitted_at", "created_at", "updated_at", "status", "tracking_number"}
USER_SORT_FIELDS = {"created_at", "name", "email", "last_login"}


# ====================
# Dashboard
# ====================

@router.get("/dashboard")
def dashboard(db: Session = Depends(get_db)):
    result = analytics_service.dashboard_stats(db)
    return success_response({
        "stats": result["stats"],
        "recent_submissions": [
            AdminUserApplicationResponse.model_validate(s) for s in result["recent_submissions"]
        ],
    })


# ====================
# Application management
# ====================

@router.get("/applications")
def list_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[ApplicationCategory] = None,
    is_active: Optional[bool] = None,
    sort_by: str = Query("created_at"),
    sort_order: str = Query("DESC"),
    db: Session = Depends(get_db)
):
    rows, total = catalog_service.admin_list_applications(
        db, page, limit, category.value if category else None, is_active, sort_by, sort_order
    )
    return success_response({
        "applications": [ApplicationDetail.model_validate(a) for a in rows],
        "pagination": pagination_meta(page, limit, total),
    })


@router.post("/applications", status_code=status.HTTP_201_CREATED)
def create_application(
    data: ApplicationCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    application = catalog_service.create_application(db, admin, data)
    return success_response(
        {"application": ApplicationDetail.model_validate(application)},
        "Application created successfully",
    )


@router.put("/applications/{application_id}")
def update_application(application_id: str, data: ApplicationUpdate, db: Session = Depends(get_db)):
    application = catalog_service.update_application(db, application_id, data)
    return success_response(
        {"application": ApplicationDetail.model_validate(application)},
        "Application updated successfully",
    )


@router.delete("/applications/{application_id}")
def delete_application(application_id: str, db: Session = Depends(get_db)):
    catalog_service.deactivate_application(db, application_id)
    return success_response(message="Application deleted successfully")


# ====================
# Submission management
# ====================

@router.get("/user-applications")
def list_user_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[SubmissionStatus] = Query(None, alias="status"),
    submission_type: Optional[SubmissionType] = None,
    sort_by: str = Query("submitted_at"),
    sort_order: str = Query("DESC"),
    db: Session = Depends(get_db)
):
    query = db.query(UserApplication).options(
        joinedload(UserApplication.user),
        joinedload(UserApplication.application),
        joinedload(UserApplication.payment),
        selectinload(UserApplication.documents)
    )
    if status_filter:
        query = query.filter(UserApplication.status == status_filter.value)
    if submission_type:
        query = query.filter(UserApplication.submission_type == submission_type.value)
    query = query.order_by(
        order_clause(UserApplication, sort_by, sort_order, SUBMISSION_SORT_FIELDS, "submitted_at")
    )

    rows, total = paginate(query, page, limit)
    return success_response({
        "applications": [AdminUserApplicationResponse.model_validate(s) for s in rows],
        "pagination": pagination_meta(page, limit, total),
    })


@router.get("/user-applications/{user_application_id}")
def get_user_application(user_application_id: str, db: Session = Depends(get_db)):
    submission = db.query(UserApplication).filter(UserApplication.id == user_application_id).first()
    if not submission:
        raise NotFoundError("User application not found")
    return success_response({"application": AdminUserApplicationDetail.model_validate(submission)})


@router.put("/user-applications/{user_application_id}/status")
def update_submission_status(
    user_application_id: str,
    data: StatusUpdateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db)
):
    submission = SubmissionService.update_status(
        db,
        user_application_id,
        data.status.value,
        admin_notes=data.admin_notes,
        rejection_reason=data.rejection_reason,
    )

    background_tasks.add_task(
        email_service.notify, "status update",
        email_service.send_status_update_email,
        submission.user.email,
        submission.user.name,
        submission.application.title,
        submission.tracking_number,
        submission.status,
        admin_notes=submission.admin_notes,
        rejection_reason=submission.rejection_reason,
    )

    return success_response(
        {"application": AdminUserApplicationResponse.model_validate(submission)},
        "Application status updated successfully",
    )


# ====================
# User management
# ====================

@router.get("/users")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    sort_by: str = Query("created_at"),
    sort_order: str = Query("DESC"),
    db: Session = Depends(get_db)
):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role.value)
    if is_active is not None:
        query = query.filter(User.is_active == is_active)
    query = query.order_by(order_clause(User, sort_by, sort_order, USER_SORT_FIELDS, "created_at"))

    rows, total = paginate(query, page, limit)
    return success_response({
        "users": [UserResponse.model_validate(u) for u in rows],
        "pagination": pagination_meta(page, limit, total),
    })


@router.get("/users/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")

    body = UserResponse.model_validate(user).model_dump(mode="json")
    body["applications"] = [UserApplicationResponse.model_validate(s).model_dump(mode="json") for s in user.applications]
    body["payments"] = [PaymentSummary.model_validate(p).model_dump(mode="json") for p in user.payments]
    return success_response({"user": body})


@router.put("/users/{user_id}/status")
def update_user_status(
    user_id: str,
    data: UserStatusUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")

    user.is_active = data.is_active
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.email} {'activated' if user.is_active else 'deactivated'} by {admin.email}")

    return success_response(
        {"user": UserSummary.model_validate(user)},
        f"User {'activated' if user.is_active else 'deactivated'} successfully",
    )


# ====================
# Analytics
# ====================

@router.get("/analytics/overview")
def analytics_overview(period: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)):
    return success_response(analytics_service.overview(db, period))


@router.get("/analytics/applications")
def analytics_applications(db: Session = Depends(get_db)):
    return success_response({"popular_applications": analytics_service.popular_applications(db)})


@router.get("/analytics/payments")
def analytics_payments(period: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)):
    return success_response(analytics_service.payment_analytics(db, period))

# online_forms/routes/user_applications.py
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session, selectinload
from typing import Optional
import logging

from online_forms.auth.dependencies import get_current_user
from online_forms.database import get_db
from online_forms.models.enums import SubmissionStatus
from online_forms.models.user import User
from online_forms.models.user_application import UserApplication
from online_forms.schemas.user_application import (
    DocumentResponse,
    SubmitDocumentsRequest,
    SubmitFormRequest,
    UserApplicationDetail,
    UserApplicationResponse,
    UserApplicationUpdate,
)
from online_forms.services import email_service
from online_forms.services.submission_service import SubmissionService
from online_forms.utils.pagination import order_clause, paginate, pagination_meta
from online_forms.utils.responses import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user-applications", tags=["User Applications"])

SORT_FIELDS = {"submitted_at", "created_at", "updated_at", "status"}


@router.post("/submit-form", status_code=status.HTTP_201_CREATED)
def submit_form(
    data: SubmitFormRequest,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    submission = SubmissionService.submit_form(db, current_user, str(data.application_id), data.form_data)

    background_tasks.add_task(
        email_service.notify, "submission confirmation",
        email_service.send_submission_confirmation_email,
        current_user.email,
        current_user.name,
        submission.application.title,
        submission.tracking_number,
        submission.submission_type,
        submission.submitted_at,
    )

    return success_response(
        {"application": UserApplicationResponse.model_validate(submission)},
        "Application submitted successfully",
    )


@router.post("/upload-documents", status_code=status.HTTP_201_CREATED)
def submit_documents(
    data: SubmitDocumentsRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    submission = SubmissionService.submit_documents(db, current_user, str(data.application_id))
    fee = submission.application.processing_fee

    return success_response(
        {
            "application": UserApplicationResponse.model_validate(submission),
            "processing_fee": float(fee) if fee is not None else None,
            "requires_payment": bool(fee),
        },
        "Document application created. Please upload your documents and complete payment.",
    )


@router.post("/{user_application_id}/documents", status_code=status.HTTP_201_CREATED)
async def upload_document(
    user_application_id: str,
    file: UploadFile = File(...),
    document_type: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    document = await SubmissionService.add_document(db, current_user, user_application_id, file, document_type)
    return success_response(
        {
            "document": DocumentResponse.model_validate(document),
            "document_count": SubmissionService.document_count(db, user_application_id),
        },
        "Document uploaded successfully",
    )


@router.get("")
def list_user_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[SubmissionStatus] = Query(None, alias="status"),
    sort_by: str = Query("submitted_at"),
    sort_order: str = Query("DESC"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = db.query(UserApplication).options(
        selectinload(UserApplication.application),
        selectinload(UserApplication.payment),
        selectinload(UserApplication.documents)
    ).filter(UserApplication.user_id == current_user.id)
    if status_filter:
        query = query.filter(UserApplication.status == status_filter.value)
    query = query.order_by(order_clause(UserApplication, sort_by, sort_order, SORT_FIELDS, "submitted_at"))

    rows, total = paginate(query, page, limit)
    return success_response({
        "applications": [UserApplicationResponse.model_validate(s) for s in rows],
        "pagination": pagination_meta(page, limit, total),
    })


@router.get("/{user_application_id}")
def get_user_application(
    user_application_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    submission = SubmissionService.get_owned(db, current_user, user_application_id)
    return success_response({"application": UserApplicationDetail.model_validate(submission)})


@router.put("/{user_application_id}")
def update_user_application(
    user_application_id: str,
    data: UserApplicationUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    submission = SubmissionService.update_form_data(db, current_user, user_application_id, data.form_data)
    return success_response(
        {"application": UserApplicationResponse.model_validate(submission)},
        "Application updated successfully",
    )


@router.delete("/{user_application_id}")
def delete_user_application(
    user_application_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    SubmissionService.delete(db, current_user, user_application_id)
    return success_response(message="Application deleted successfully")

# online_forms/services/submission_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from online_forms.config import settings
from online_forms.models.application import Application
from online_forms.models.document import Document
from online_forms.models.enums import SubmissionStatus, SubmissionType, TERMINAL_STATUSES
from online_forms.models.user import User
from online_forms.models.user_application import UserApplication
from online_forms.utils.errors import AppError, ConflictError, NotFoundError
from online_forms.utils.upload import ALLOWED_MIME_TYPES, remove_upload_folder, save_upload

logger = logging.getLogger(__name__)

DUPLICATE_SUBMISSION_MESSAGE = "You have already submitted this application"


class SubmissionService:
    """Lifecycle of a UserApplication: create, owner edits, admin status changes."""

    @staticmethod
    def _insert(db: Session, submission: UserApplication) -> UserApplication:
        """
        Insert relying on uq_user_application. A concurrent double submit
        loses at the database and surfaces as the conflict error.
        """
        db.add(submission)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            duplicate = db.query(UserApplication.id).filter(
                UserApplication.user_id == submission.user_id,
                UserApplication.application_id == submission.application_id
            ).first()
            if duplicate:
                logger.warning(f"Duplicate submission by {submission.user_id} for {submission.application_id}")
                raise ConflictError(DUPLICATE_SUBMISSION_MESSAGE)
            raise e
        db.refresh(submission)
        return submission

    @staticmethod
    def submit_form(db: Session, user: User, application_id: str, form_data: Dict[str, Any]) -> UserApplication:
        application = db.query(Application).filter(
            Application.id == application_id,
            Application.is_active == True  # noqa: E712
        ).first()
        if not application:
            raise NotFoundError("Application not found or inactive")

        submission = UserApplication(
            user_id=user.id,
            application_id=application.id,
            submission_type=SubmissionType.form.value,
            form_data=form_data,
            status=SubmissionStatus.pending.value,
        )
        submission = SubmissionService._insert(db, submission)
        logger.info(f"✅ Form submission {submission.tracking_number} created for {user.email}")
        return submission

    @staticmethod
    def submit_documents(db: Session, user: User, application_id: str) -> UserApplication:
        application = db.query(Application).filter(
            Application.id == application_id,
            Application.is_active == True,  # noqa: E712
            Application.allow_document_upload == True  # noqa: E712
        ).first()
        if not application:
            raise NotFoundError("Application not found or does not allow document upload")

        submission = UserApplication(
            user_id=user.id,
            application_id=application.id,
            submission_type=SubmissionType.document.value,
            status=SubmissionStatus.pending.value,
            amount_paid=application.processing_fee,
        )
        submission = SubmissionService._insert(db, submission)
        logger.info(f"✅ Document submission {submission.tracking_number} created for {user.email}")
        return submission

    @staticmethod
    def get_owned(db: Session, user: User, submission_id: str) -> UserApplication:
        submission = db.query(UserApplication).filter(
            UserApplication.id == submission_id,
            UserApplication.user_id == user.id
        ).first()
        if not submission:
            raise NotFoundError("Application not found")
        return submission

    @staticmethod
    def _get_editable(db: Session, user: User, submission_id: str, action: str) -> UserApplication:
        submission = db.query(UserApplication).filter(
            UserApplication.id == submission_id,
            UserApplication.user_id == user.id,
            UserApplication.status == SubmissionStatus.pending.value
        ).first()
        if not submission:
            raise NotFoundError(f"Application not found or cannot be {action}")
        return submission

    @staticmethod
    def update_form_data(db: Session, user: User, submission_id: str,
                         form_data: Optional[Dict[str, Any]]) -> UserApplication:
        submission = SubmissionService._get_editable(db, user, submission_id, "edited")

        # Document submissions carry no form payload
        if submission.submission_type == SubmissionType.form.value and form_data:
            submission.form_data = form_data
            db.commit()
            db.refresh(submission)
            logger.info(f"Form data replaced on {submission.tracking_number}")
        return submission

    @staticmethod
    def delete(db: Session, user: User, submission_id: str):
        submission = SubmissionService._get_editable(db, user, submission_id, "deleted")
        tracking_number = submission.tracking_number
        has_documents = bool(submission.documents)

        db.delete(submission)
        db.commit()

        if has_documents:
            remove_upload_folder(submission_id)
        logger.info(f"🗑️ Submission {tracking_number} deleted by {user.email}")

    @staticmethod
    async def add_document(db: Session, user: User, submission_id: str, file: UploadFile,
                           document_type: Optional[str] = None) -> Document:
        submission = SubmissionService._get_editable(db, user, submission_id, "updated")
        if submission.submission_type != SubmissionType.document.value:
            raise AppError("Documents can only be attached to document submissions")

        if file.content_type not in ALLOWED_MIME_TYPES:
            raise AppError(f"Unsupported file type {file.content_type}. Allowed: PDF, JPEG, PNG")

        content = await file.read()
        max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
        if not content:
            raise AppError("Uploaded file is empty")
        if len(content) > max_bytes:
            raise AppError(f"File exceeds the {settings.MAX_UPLOAD_SIZE_MB}MB limit")

        file_name, _ = save_upload(file, submission.id, content)
        document = Document(
            user_application_id=submission.id,
            file_name=file_name,
            original_name=file.filename or file_name,
            mime_type=file.content_type,
            file_size=len(content),
            file_url=f"/uploads/{submission.id}/{file_name}",
            document_type=document_type,
        )
        db.add(document)
        db.commit()
        db.refresh(document)
        logger.info(f"📎 Document {document.original_name} attached to {submission.tracking_number}")
        return document

    @staticmethod
    def document_count(db: Session, submission_id: str) -> int:
        return db.query(Document).filter(Document.user_application_id == submission_id).count()

    @staticmethod
    def update_status(db: Session, submission_id: str, new_status: str,
                      admin_notes: Optional[str] = None,
                      rejection_reason: Optional[str] = None,
                      enforce_terminal: Optional[bool] = None) -> UserApplication:
        """
        Admin status change. Any status may move to any status unless
        ENFORCE_TERMINAL_STATUSES is on, in which case completed/rejected
        only accept a repeat of themselves.
        """
        submission = db.query(UserApplication).filter(UserApplication.id == submission_id).first()
        if not submission:
            raise NotFoundError("User application not found")

        if enforce_terminal is None:
            enforce_terminal = settings.ENFORCE_TERMINAL_STATUSES
        if enforce_terminal and submission.status in TERMINAL_STATUSES and new_status != submission.status:
            raise ConflictError(f"Application is already {submission.status} and cannot move to {new_status}")

        previous = submission.status
        submission.status = new_status
        if admin_notes is not None:
            submission.admin_notes = admin_notes

        now = datetime.now(timezone.utc)
        if new_status == SubmissionStatus.completed.value:
            submission.completed_at = now
        elif new_status == SubmissionStatus.rejected.value:
            submission.rejected_at = now
            submission.rejection_reason = rejection_reason

        db.commit()
        db.refresh(submission)
        logger.info(f"Submission {submission.tracking_number}: {previous} -> {new_status}")
        return submission

# online_forms/schemas/user_application.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID

from online_forms.models.enums import SubmissionStatus
from online_forms.schemas.application import ApplicationSummary, ApplicationResponse
from online_forms.schemas.payment import PaymentSummary, PaymentResponse
from online_forms.schemas.user import UserSummary


class SubmitFormRequest(BaseModel):
    application_id: UUID
    form_data: Dict[str, Any]


class SubmitDocumentsRequest(BaseModel):
    application_id: UUID


class UserApplicationUpdate(BaseModel):
    form_data: Optional[Dict[str, Any]] = None


class StatusUpdateRequest(BaseModel):
    status: SubmissionStatus
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None


class DocumentResponse(BaseModel):
    id: str
    file_name: str
    original_name: str
    mime_type: str
    file_size: int
    file_url: str
    document_type: Optional[str] = None
    is_verified: bool
    verified_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserApplicationBase(BaseModel):
    id: str
    user_id: str
    application_id: str
    status: str
    submission_type: str
    form_data: Optional[Dict[str, Any]] = None
    payment_id: Optional[str] = None
    amount_paid: Optional[float] = None
    tracking_number: str
    submitted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserApplicationResponse(UserApplicationBase):
    application: Optional[ApplicationSummary] = None
    payment: Optional[PaymentSummary] = None
    documents: List[DocumentResponse] = []


class UserApplicationDetail(UserApplicationBase):
    application: Optional[ApplicationResponse] = None
    payment: Optional[PaymentResponse] = None
    documents: List[DocumentResponse] = []


class AdminUserApplicationResponse(UserApplicationResponse):
    user: Optional[UserSummary] = None


class AdminUserApplicationDetail(UserApplicationDetail):
    user: Optional[UserSummary] = None

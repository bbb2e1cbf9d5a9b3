# online_forms/schemas/application.py
from pydantic import BaseModel, Field, ConfigDict, HttpUrl
from typing import Optional, List
from datetime import datetime

from online_forms.models.enums import ApplicationCategory, FieldType


class FormFieldCreate(BaseModel):
    label: str = Field(..., min_length=1, max_length=200)
    field_type: FieldType
    is_required: bool = False
    options: Optional[List[str]] = None
    placeholder: Optional[str] = None
    validation_pattern: Optional[str] = None
    help_text: Optional[str] = None
    order: Optional[int] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None


class FormFieldResponse(BaseModel):
    id: str
    label: str
    field_type: str
    is_required: bool
    options: Optional[List[str]] = None
    placeholder: Optional[str] = None
    validation_pattern: Optional[str] = None
    help_text: Optional[str] = None
    order: int
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class ApplicationCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=1)
    category: ApplicationCategory
    image_url: Optional[HttpUrl] = None
    tutorial_url: Optional[HttpUrl] = None
    redirect_url: HttpUrl
    allow_document_upload: bool = True
    processing_fee: Optional[float] = Field(None, ge=0)
    estimated_time: Optional[int] = Field(None, ge=1)
    priority: int = Field(0, ge=0, le=10)
    tags: List[str] = []
    requirements: Optional[str] = None
    form_fields: List[FormFieldCreate] = Field(..., min_length=1)

    model_config = ConfigDict(title="ApplicationCreate")


class ApplicationUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[ApplicationCategory] = None
    image_url: Optional[HttpUrl] = None
    tutorial_url: Optional[HttpUrl] = None
    redirect_url: Optional[HttpUrl] = None
    allow_document_upload: Optional[bool] = None
    processing_fee: Optional[float] = Field(None, ge=0)
    estimated_time: Optional[int] = Field(None, ge=1)
    priority: Optional[int] = Field(None, ge=0, le=10)
    tags: Optional[List[str]] = None
    requirements: Optional[str] = None
    is_active: Optional[bool] = None
    # Replaces the whole field list when given
    form_fields: Optional[List[FormFieldCreate]] = None

    model_config = ConfigDict(title="ApplicationUpdate")


class CreatorSummary(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class ApplicationSummary(BaseModel):
    id: str
    title: str
    category: str
    image_url: Optional[str] = None
    processing_fee: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class ApplicationResponse(BaseModel):
    id: str
    title: str
    description: str
    category: str
    image_url: Optional[str] = None
    tutorial_url: Optional[str] = None
    redirect_url: str
    allow_document_upload: bool
    processing_fee: Optional[float] = None
    estimated_time: Optional[int] = None
    is_active: bool
    priority: int
    tags: List[str] = []
    requirements: Optional[str] = None
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    form_fields: List[FormFieldResponse] = []

    model_config = ConfigDict(from_attributes=True, title="ApplicationResponse")


class ApplicationDetail(ApplicationResponse):
    creator: Optional[CreatorSummary] = None

# online_forms/models/form_field.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, Numeric, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid

from online_forms.database import Base


class FormField(Base):
    __tablename__ = "form_fields"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    application_id = Column(String(36), ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String(200), nullable=False)
    field_type = Column(String(20), nullable=False)  # see FieldType
    is_required = Column(Boolean, default=False, nullable=False)
    options = Column(JSON, nullable=True)
    placeholder = Column(String(255), nullable=True)
    validation_pattern = Column(String(255), nullable=True)
    help_text = Column(Text, nullable=True)
    # Not unique in the database; rendering order only
    order = Column(Integer, default=0, nullable=False, index=True)
    min_length = Column(Integer, nullable=True)
    max_length = Column(Integer, nullable=True)
    min_value = Column(Numeric, nullable=True)
    max_value = Column(Numeric, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    application = relationship("Application", back_populates="form_fields")

# online_forms/models/application.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, Numeric, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid

from online_forms.database import Base


class Application(Base):
    """A catalog entry describing an external process users can apply for."""
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, index=True)
    image_url = Column(String(500), nullable=True)
    tutorial_url = Column(String(500), nullable=True)
    redirect_url = Column(String(500), nullable=False)
    allow_document_upload = Column(Boolean, default=True, nullable=False)
    processing_fee = Column(Numeric(10, 2), nullable=True)
    estimated_time = Column(Integer, nullable=True)  # minutes
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    priority = Column(Integer, default=0, nullable=False, index=True)  # 0-10
    tags = Column(JSON, default=list)
    requirements = Column(Text, nullable=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    form_fields = relationship(
        "FormField",
        back_populates="application",
        order_by="FormField.order",
        cascade="all, delete-orphan",
    )
    submissions = relationship("UserApplication", back_populates="application")
    creator = relationship("User")

    def __repr__(self):
        return f"<Application {self.title} [{self.category}]>"

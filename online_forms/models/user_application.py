# online_forms/models/user_application.py
from sqlalchemy import Column, String, DateTime, Text, Numeric, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid

from online_forms.database import Base
from online_forms.models.enums import SubmissionStatus
from online_forms.utils.tracking import generate_tracking_number


class UserApplication(Base):
    """One user's submission against an Application."""
    __tablename__ = "user_applications"
    __table_args__ = (
        UniqueConstraint("user_id", "application_id", name="uq_user_application"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    application_id = Column(String(36), ForeignKey("applications.id"), nullable=False, index=True)
    status = Column(String(20), default=SubmissionStatus.pending.value, nullable=False, index=True)
    submission_type = Column(String(20), nullable=False)  # form, document
    form_data = Column(JSON, nullable=True)
    payment_id = Column(String(36), ForeignKey("payments.id"), nullable=True)
    amount_paid = Column(Numeric(10, 2), nullable=True)

    # Generated once, on insert
    tracking_number = Column(String(40), unique=True, nullable=False, default=generate_tracking_number, index=True)
    external_application_id = Column(String(100), nullable=True)

    submitted_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="applications")
    application = relationship("Application", back_populates="submissions")
    payment = relationship("Payment", back_populates="applications")
    documents = relationship("Document", back_populates="user_application", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<UserApplication {self.tracking_number}: {self.status}>"

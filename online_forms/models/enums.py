# online_forms/models/enums.py
from enum import Enum


class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class ApplicationCategory(str, Enum):
    government = "Government"
    education = "Education"
    healthcare = "Healthcare"
    finance = "Finance"
    legal = "Legal"
    other = "Other"


class FieldType(str, Enum):
    text = "text"
    email = "email"
    phone = "phone"
    number = "number"
    dropdown = "dropdown"
    multi_select = "multiSelect"
    date = "date"
    file = "file"
    textarea = "textarea"
    checkbox = "checkbox"
    radio = "radio"


class SubmissionStatus(str, Enum):
    pending = "pending"
    in_progress = "inProgress"
    completed = "completed"
    rejected = "rejected"


# Statuses an admin normally does not move a submission out of
TERMINAL_STATUSES = {SubmissionStatus.completed.value, SubmissionStatus.rejected.value}


class SubmissionType(str, Enum):
    form = "form"
    document = "document"


class PaymentStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class PaymentGateway(str, Enum):
    razorpay = "razorpay"
    stripe = "stripe"
    paypal = "paypal"

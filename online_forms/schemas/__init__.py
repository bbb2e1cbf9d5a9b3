# online_forms/schemas/__init__.py
from .user import (
    UserRegister,
    UserLogin,
    UserResponse,
    UserSummary,
    ProfileUpdate,
)
from .application import (
    ApplicationCreate,
    ApplicationUpdate,
    ApplicationResponse,
    ApplicationDetail,
    ApplicationSummary,
    FormFieldCreate,
)
from .payment import (
    CreateOrderRequest,
    VerifyPaymentRequest,
    PaymentResponse,
)
from .user_application import (
    SubmitFormRequest,
    SubmitDocumentsRequest,
    StatusUpdateRequest,
    UserApplicationResponse,
    UserApplicationDetail,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "UserSummary",
    "ProfileUpdate",
    "ApplicationCreate",
    "ApplicationUpdate",
    "ApplicationResponse",
    "ApplicationDetail",
    "ApplicationSummary",
    "FormFieldCreate",
    "CreateOrderRequest",
    "VerifyPaymentRequest",
    "PaymentResponse",
    "SubmitFormRequest",
    "SubmitDocumentsRequest",
    "StatusUpdateRequest",
    "UserApplicationResponse",
    "UserApplicationDetail",
]

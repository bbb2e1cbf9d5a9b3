# online_forms/models/__init__.py

from .user import User
from .application import Application
from .form_field import FormField
from .payment import Payment
from .user_application import UserApplication
from .document import Document

__all__ = ["User", "Application", "FormField", "Payment", "UserApplication", "Document"]

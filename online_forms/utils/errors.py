# online_forms/utils/errors.py
from typing import Any, List, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """
    The single domain error raised by routes and services. The handlers in
    main.py turn it into the {success, message, errors} envelope.
    """

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST,
                 errors: Optional[List[Any]] = None, headers: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.message = message
        self.errors = errors


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_409_CONFLICT)


class AuthError(AppError):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(AppError):
    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class UpstreamError(AppError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)

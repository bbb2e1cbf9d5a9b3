# online_forms/utils/responses.py
from typing import Any, Optional


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    """The {success, data?, message?} envelope every route returns."""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def error_body(message: str, errors: Any = None) -> dict:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body

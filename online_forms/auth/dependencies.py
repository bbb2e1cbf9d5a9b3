# online_forms/auth/dependencies.py
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import logging

from online_forms.database import get_db
from online_forms.models.user import User
from online_forms.utils.errors import AuthError, ForbiddenError
from online_forms.utils.jwt_handler import JWTError, ExpiredSignatureError, decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches our own 401 message
bearer_scheme = HTTPBearer(auto_error=False)


def _user_from_token(token: str, db: Session) -> User:
    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        raise AuthError("Token has expired")
    except JWTError as e:
        logger.warning(f"Token rejected: {str(e)}")
        raise AuthError("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthError("User no longer exists")
    if not user.is_active:
        raise AuthError("Your account has been deactivated")
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    if not credentials or not credentials.credentials:
        raise AuthError("Access token is required")
    return _user_from_token(credentials.credentials, db)


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        logger.warning(f"Non-admin {current_user.email} tried an admin route")
        raise ForbiddenError()
    return current_user

# online_forms/utils/jwt_handler.py
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import JWTError, ExpiredSignatureError, jwt

from online_forms.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode.update({
        "exp": expire,
        "iat": now,
        "type": ACCESS_TOKEN_TYPE
    })

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT refresh token, signed with its own secret
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))

    to_encode.update({
        "exp": expire,
        "iat": now,
        "type": REFRESH_TOKEN_TYPE
    })

    return jwt.encode(to_encode, settings.refresh_secret, algorithm=settings.ALGORITHM)


def create_token_pair(user_id: str) -> dict:
    return {
        "access_token": create_access_token({"sub": user_id}),
        "refresh_token": create_refresh_token({"sub": user_id}),
        "token_type": "bearer",
    }


def decode_access_token(token: str) -> dict:
    """
    Verify an access token. Raises ExpiredSignatureError / JWTError.
    """
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise JWTError("Not an access token")
    return payload


def verify_refresh_token(token: str) -> Optional[dict]:
    """
    Return the payload of a valid refresh token, None otherwise
    """
    try:
        payload = jwt.decode(token, settings.refresh_secret, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"Refresh token rejected: {str(e)}")
        return None

    if payload.get("type") != REFRESH_TOKEN_TYPE:
        return None
    return payload


__all__ = [
    "JWTError",
    "ExpiredSignatureError",
    "create_access_token",
    "create_refresh_token",
    "create_token_pair",
    "decode_access_token",
    "verify_refresh_token",
]

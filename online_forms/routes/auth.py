# online_forms/routes/auth.py
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
import secrets
import logging

from online_forms.auth.dependencies import get_current_user
from online_forms.config import settings
from online_forms.database import get_db
from online_forms.models.user import User
from online_forms.schemas.user import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ProfileUpdate,
    RefreshTokenRequest,
    ResetPasswordRequest,
    UserLogin,
    UserRegister,
    UserResponse,
    VerifyEmailRequest,
)
from online_forms.services import email_service
from online_forms.utils.errors import AppError, AuthError, ConflictError, NotFoundError, UpstreamError
from online_forms.utils.hash import hash_password, verify_password
from online_forms.utils.jwt_handler import create_token_pair, verify_refresh_token
from online_forms.utils.responses import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def new_token() -> str:
    return secrets.token_hex(32)


def _session_payload(user: User) -> dict:
    return {"user": UserResponse.model_validate(user), **create_token_pair(user.id)}


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: UserRegister, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    if db.query(User).filter(func.lower(User.email) == data.email).first():
        raise ConflictError("User with this email already exists")

    user = User(
        name=data.name,
        email=data.email,
        hashed_password=hash_password(data.password),
        phone=data.phone,
        email_verification_token=new_token(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"✅ Registered {user.email}")

    background_tasks.add_task(
        email_service.notify, "verification",
        email_service.send_verification_email, user.email, user.name, user.email_verification_token,
    )

    return success_response(
        _session_payload(user),
        "User registered successfully. Please check your email for verification.",
    )


@router.post("/login")
def login(data: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(func.lower(User.email) == data.email.lower()).first()
    if not user or not verify_password(data.password, user.hashed_password):
        logger.warning(f"Failed login for {data.email}")
        raise AuthError("Invalid email or password")

    if not user.is_active:
        raise AuthError("Your account has been deactivated. Please contact support.")

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    return success_response(_session_payload(user), "Login successful")


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards them
    return success_response(message="Logout successful")


@router.post("/refresh-token")
def refresh_token(data: RefreshTokenRequest, db: Session = Depends(get_db)):
    if not data.refresh_token:
        raise AppError("Refresh token is required")

    payload = verify_refresh_token(data.refresh_token)
    if not payload or not payload.get("sub"):
        raise AuthError("Invalid refresh token")

    user = db.query(User).filter(User.id == payload["sub"]).first()
    if not user or not user.is_active:
        raise AuthError("Invalid refresh token")

    return success_response(create_token_pair(user.id))


@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(func.lower(User.email) == data.email.lower()).first()
    if not user:
        raise NotFoundError("No user found with this email address")

    user.password_reset_token = new_token()
    user.password_reset_expires = datetime.now(timezone.utc) + timedelta(
        minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES
    )
    db.commit()

    # The one notification whose outcome drives the response
    delivered = await email_service.notify(
        "password reset",
        email_service.send_password_reset_email, user.email, user.name, user.password_reset_token,
    )
    if not delivered:
        user.password_reset_token = None
        user.password_reset_expires = None
        db.commit()
        raise UpstreamError("Failed to send password reset email")

    return success_response(message="Password reset email sent successfully")


@router.post("/reset-password")
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(
        User.password_reset_token == data.token,
        User.password_reset_expires > datetime.now(timezone.utc)
    ).first()
    if not user:
        raise AppError("Invalid or expired reset token")

    user.hashed_password = hash_password(data.password)
    user.password_reset_token = None
    user.password_reset_expires = None
    db.commit()
    logger.info(f"🔐 Password reset for {user.email}")

    return success_response(message="Password reset successful")


@router.post("/change-password")
def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not verify_password(data.current_password, current_user.hashed_password):
        raise AppError("Current password is incorrect")

    current_user.hashed_password = hash_password(data.new_password)
    db.commit()
    return success_response(message="Password changed successfully")


@router.post("/verify-email")
def verify_email(data: VerifyEmailRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email_verification_token == data.token).first()
    if not user:
        raise AppError("Invalid verification token")

    user.email_verified = True
    user.email_verification_token = None
    db.commit()
    logger.info(f"📧 Email verified for {user.email}")

    return success_response(message="Email verified successfully")


@router.post("/resend-verification")
def resend_verification(
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if current_user.email_verified:
        raise AppError("Email is already verified")

    current_user.email_verification_token = new_token()
    db.commit()

    background_tasks.add_task(
        email_service.notify, "verification",
        email_service.send_verification_email,
        current_user.email, current_user.name, current_user.email_verification_token,
    )
    return success_response(message="Verification email sent successfully")


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return success_response({"user": UserResponse.model_validate(current_user)})


@router.put("/profile")
def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    for key, value in data.model_dump(exclude_unset=True).items():
        if key == "name" and not value:
            continue
        setattr(current_user, key, value)
    db.commit()
    db.refresh(current_user)

    return success_response({"user": UserResponse.model_validate(current_user)}, "Profile updated successfully")

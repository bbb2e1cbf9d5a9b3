from fastapi_mail import FastMail, MessageSchema, MessageType, ConnectionConfig
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pathlib import Path
from typing import Awaitable, Callable, Optional
import logging

from online_forms.config import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)

STATUS_COLORS = {
    "pending": "#F59E0B",
    "inProgress": "#3B82F6",
    "completed": "#10B981",
    "rejected": "#EF4444",
}

STATUS_LABELS = {
    "pending": "Pending",
    "inProgress": "In Progress",
    "completed": "Completed",
    "rejected": "Rejected",
}


def _connection_config(port: int, use_ssl: bool) -> ConnectionConfig:
    # Built per send so a half-configured SMTP setup fails inside the retry wrapper
    return ConnectionConfig(
        MAIL_USERNAME=settings.EMAIL_HOST_USER,
        MAIL_PASSWORD=settings.EMAIL_HOST_PASSWORD,
        MAIL_FROM=settings.EMAIL_FROM,
        MAIL_FROM_NAME="Online Forms",
        MAIL_PORT=port,
        MAIL_SERVER=settings.EMAIL_HOST,
        MAIL_STARTTLS=not use_ssl,
        MAIL_SSL_TLS=use_ssl,
        USE_CREDENTIALS=bool(settings.EMAIL_HOST_USER),
        VALIDATE_CERTS=True,
    )


def render_template(template: str, **context) -> str:
    return env.get_template(template).render(app_name=settings.APP_NAME, **context)


# 🔁 Central retry wrapper
async def send_email_with_retry(message: MessageSchema, subject: str, to_email: str) -> bool:
    """Try sending via STARTTLS on the configured port first, then SSL (465) if it fails"""
    try:
        fm = FastMail(_connection_config(settings.EMAIL_PORT, use_ssl=False))
        await fm.send_message(message)
        logger.info(f"{subject} email sent to {to_email} via port {settings.EMAIL_PORT}")
        return True
    except Exception as e:
        logger.warning(f"Failed to send {subject} via port {settings.EMAIL_PORT}: {str(e)}")
        try:
            fm = FastMail(_connection_config(465, use_ssl=True))
            await fm.send_message(message)
            logger.info(f"{subject} email sent to {to_email} via port 465")
            return True
        except Exception as e2:
            logger.error(f"Failed to send {subject} email via both ports: {str(e2)}")
            return False


async def send_templated_email(to_email: str, subject: str, template: str, **context) -> bool:
    html = render_template(template, **context)
    message = MessageSchema(
        subject=subject,
        recipients=[to_email],
        body=html,
        subtype=MessageType.html
    )
    return await send_email_with_retry(message, subject, to_email)


async def notify(description: str, send: Callable[..., Awaitable[bool]], *args, **kwargs) -> Optional[bool]:
    """
    Fire-and-forget wrapper: the result is only logged, and no exception
    ever reaches the caller. Routes queue it with BackgroundTasks.add_task.
    """
    try:
        delivered = await send(*args, **kwargs)
    except Exception as e:
        logger.error(f"Failed to send {description} email: {str(e)}")
        return None
    if not delivered:
        logger.warning(f"{description} email was not delivered")
    return delivered


async def send_verification_email(to_email: str, name: str, token: str) -> bool:
    verification_url = f"{settings.FRONTEND_URL}/verify-email?token={token}"
    return await send_templated_email(
        to_email,
        "Verify Your Email - Online Forms",
        "email_verification.html",
        name=name,
        verification_url=verification_url,
    )


async def send_password_reset_email(to_email: str, name: str, token: str) -> bool:
    reset_url = f"{settings.FRONTEND_URL}/reset-password?token={token}"
    return await send_templated_email(
        to_email,
        "Password Reset - Online Forms",
        "password_reset.html",
        name=name,
        reset_url=reset_url,
        expires_minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES,
    )


async def send_submission_confirmation_email(to_email: str, user_name: str, application_title: str,
                                             tracking_number: str, submission_type: str,
                                             submitted_at) -> bool:
    return await send_templated_email(
        to_email,
        f"Application Submitted - {application_title}",
        "application_submitted.html",
        user_name=user_name,
        application_title=application_title,
        tracking_number=tracking_number,
        submission_type="Form Submission" if submission_type == "form" else "Document Submission",
        status=STATUS_LABELS["pending"],
        submitted_at=submitted_at.strftime("%d %b %Y") if submitted_at else "",
    )


async def send_status_update_email(to_email: str, user_name: str, application_title: str,
                                   tracking_number: str, status: str,
                                   admin_notes: Optional[str] = None,
                                   rejection_reason: Optional[str] = None) -> bool:
    return await send_templated_email(
        to_email,
        f"Application Status Update - {application_title}",
        "application_status_update.html",
        user_name=user_name,
        application_title=application_title,
        tracking_number=tracking_number,
        status=STATUS_LABELS.get(status, status),
        status_color=STATUS_COLORS.get(status, "#6B7280"),
        admin_notes=admin_notes,
        rejection_reason=rejection_reason,
    )

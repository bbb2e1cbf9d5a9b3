from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List
import os

class Settings(BaseSettings):
    # === APP ===
    APP_NAME: str = Field(default="Online Forms API", description="Display name used in docs and emails")
    API_PREFIX: str = Field(default="/api/v1", description="Prefix for every API router")
    ALLOWED_ORIGINS: List[str] = Field(default=["http://localhost:3000"], description="CORS allowed origins")
    FRONTEND_URL: str = Field(default=os.environ.get("FRONTEND_URL", "http://localhost:3000"), description="Frontend base URL used in email links")

    # === DATABASE ===
    DATABASE_URL: str = Field(default=os.environ.get("DATABASE_URL", "sqlite:///./online_forms.db"), description="Database URL (PostgreSQL in production)")

    # === JWT AUTH ===
    SECRET_KEY: str = Field(default=os.environ.get("SECRET_KEY", "change-me"), description="Secret key for access token signing")
    REFRESH_SECRET_KEY: str = Field(default=os.environ.get("REFRESH_SECRET_KEY", ""), description="Secret key for refresh token signing, SECRET_KEY when empty")
    ALGORITHM: str = Field(default=os.environ.get("ALGORITHM", "HS256"), description="JWT algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7)), description="Access token lifetime in minutes")
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=int(os.environ.get("REFRESH_TOKEN_EXPIRE_DAYS", 30)), description="Refresh token lifetime in days")
    BCRYPT_ROUNDS: int = Field(default=int(os.environ.get("BCRYPT_ROUNDS", 12)), description="bcrypt cost factor")
    PASSWORD_RESET_EXPIRE_MINUTES: int = Field(default=10, description="Password reset token lifetime in minutes")

    # === EMAIL ===
    EMAIL_HOST: str = Field(default=os.environ.get("EMAIL_HOST", ""), description="SMTP host")
    EMAIL_PORT: int = Field(default=int(os.environ.get("EMAIL_PORT", 587)), description="SMTP port")
    EMAIL_HOST_USER: str = Field(default=os.environ.get("EMAIL_HOST_USER", ""), description="SMTP username")
    EMAIL_HOST_PASSWORD: str = Field(default=os.environ.get("EMAIL_HOST_PASSWORD", ""), description="SMTP password")
    EMAIL_FROM: str = Field(default=os.environ.get("EMAIL_FROM", "no-reply@onlineforms.com"), description="Email sender address")

    # === PAYMENT GATEWAY ===
    RAZORPAY_KEY_ID: str = Field(default=os.environ.get("RAZORPAY_KEY_ID", ""), description="Razorpay key id")
    RAZORPAY_KEY_SECRET: str = Field(default=os.environ.get("RAZORPAY_KEY_SECRET", ""), description="Razorpay key secret, also the HMAC key for signatures")
    RAZORPAY_API_URL: str = Field(default="https://api.razorpay.com/v1", description="Razorpay REST base URL")
    GATEWAY_TIMEOUT_SECONDS: float = Field(default=15.0, description="Timeout for gateway calls")
    DEFAULT_CURRENCY: str = Field(default="INR", description="Currency used when the client sends none")
    SUPPORTED_CURRENCIES: List[str] = Field(default=["INR", "USD"], description="Currencies accepted for orders")

    # === UPLOADS ===
    UPLOAD_DIR: str = Field(default=os.environ.get("UPLOAD_DIR", "static/uploads"), description="Directory for uploaded documents")
    MAX_UPLOAD_SIZE_MB: int = Field(default=10, description="Maximum size of one uploaded document")

    # === WORKFLOW ===
    ENFORCE_TERMINAL_STATUSES: bool = Field(default=False, description="Reject admin status changes out of completed/rejected")

    # === DEBUG MODE ===
    DEBUG: bool = Field(default=os.environ.get("DEBUG", "False").lower() == "true", description="Debug mode")

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def refresh_secret(self) -> str:
        return self.REFRESH_SECRET_KEY or self.SECRET_KEY

# Create settings instance
settings = Settings()

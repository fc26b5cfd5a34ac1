import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv(override=False)

SQLALCHEMY_DATABASE_URL = os.getenv("SQLALCHEMY_DATABASE_URL")
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")  # Use a strong random string
ALGORITHM = os.getenv("ALGORITHM", "HS256")

ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "30"))

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Renewal e-mails are scheduled against this zone
APP_TZ = os.getenv("APP_TZ", "UTC")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# EmailJS
EMAILJS_SERVICE_ID = os.getenv("EMAILJS_SERVICE_ID", "")
EMAILJS_TEMPLATE_ID = os.getenv("EMAILJS_TEMPLATE_ID", "")
EMAILJS_USER_ID = os.getenv("EMAILJS_USER_ID", "")
EMAILJS_FROM_NAME = os.getenv("EMAILJS_FROM_NAME", "SubTracker")
EMAILJS_REPLY_TO = os.getenv("EMAILJS_REPLY_TO", "no-reply@example.com")

# Google sign-in (redirect only, the callback lives with the identity provider)
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI", f"{FRONTEND_URL}/auth/callback")


class PaddleSettings(BaseModel):
    """
    Configuration for the Paddle webhook endpoint.
    Built once per process by load_paddle_settings() and injected into the handler.
    """
    api_token: Optional[str] = None
    webhook_secret: Optional[str] = None
    database_url: Optional[str] = None
    environment: str = "sandbox"
    verify_signature: bool = False

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def base_url(self) -> str:
        if self.is_production:
            return "https://api.paddle.com"
        return "https://sandbox-api.paddle.com"

    def token_error(self) -> Optional[str]:
        """Returns a message when the API token is absent or belongs to the wrong environment."""
        if not self.api_token:
            return "Missing Paddle API token"
        if self.is_production and not self.api_token.startswith("pdl_live_"):
            return "Server misconfigured: expected a LIVE server API key (pdl_live_...) for production."
        if not self.is_production and not self.api_token.startswith("pdl_sandbox_"):
            return "Server misconfigured: expected a SANDBOX server API key (pdl_sandbox_...) for non-production."
        return None

    def missing(self) -> List[str]:
        names = {
            "PADDLE_API_TOKEN": self.api_token,
            "PADDLE_WEBHOOK_SECRET": self.webhook_secret,
            "SQLALCHEMY_DATABASE_URL": self.database_url,
        }
        return [name for name, value in names.items() if not value]

    def configuration_error(self) -> Optional[str]:
        missing = self.missing()
        if missing:
            return f"Missing configuration: {', '.join(missing)}"
        return self.token_error()


def load_paddle_settings() -> PaddleSettings:
    return PaddleSettings(
        api_token=os.getenv("PADDLE_API_TOKEN"),
        webhook_secret=os.getenv("PADDLE_WEBHOOK_SECRET"),
        database_url=SQLALCHEMY_DATABASE_URL,
        environment=(os.getenv("PADDLE_ENVIRONMENT") or "sandbox").lower(),
        verify_signature=os.getenv("PADDLE_VERIFY_SIGNATURE", "false").lower() == "true",
    )

import httpx
import logging
from config import (
    EMAILJS_SERVICE_ID,
    EMAILJS_TEMPLATE_ID,
    EMAILJS_USER_ID,
    EMAILJS_FROM_NAME,
    EMAILJS_REPLY_TO,
)

logger = logging.getLogger(__name__)


class EmailService:
    SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"

    def __init__(self):
        self.service_id = EMAILJS_SERVICE_ID
        self.template_id = EMAILJS_TEMPLATE_ID
        self.user_id = EMAILJS_USER_ID
        if not self.is_configured:
            logger.warning("EmailJS is not configured. E-mails will only be logged.")

    @property
    def is_configured(self) -> bool:
        return bool(self.service_id and self.template_id and self.user_id)

    def send(self, to: str, subject: str, html: str) -> bool:
        """
        Sends through EmailJS. A rejected request is logged and still counted as
        sent so that the reminder job does not retry it every hour; only transport
        failures return False.
        """
        if not self.is_configured:
            logger.info(f"[Email] (not sent, EmailJS not configured) {subject} -> {to}")
            return False

        payload = {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.user_id,
            "template_params": {
                "to_email": to,
                "subject": subject,
                "html_content": html,
                "from_name": EMAILJS_FROM_NAME,
                "reply_to": EMAILJS_REPLY_TO,
            },
        }
        try:
            with httpx.Client() as client:
                response = client.post(self.SEND_URL, json=payload, timeout=10.0)
        except httpx.HTTPError as e:
            logger.error(f"[Email] Send failed for {to}: {e}")
            return False

        if response.is_success:
            return True
        logger.error(f"[Email] EmailJS error ({response.status_code}): {response.text}")
        logger.info(f"[Email] FALLBACK (not sent): {subject} -> {to}")
        return True

    def send_password_reset(self, to: str, reset_link: str) -> bool:
        html = (
            "<html><body>"
            "<p>We received a request to reset your SubTracker password.</p>"
            f"<p><a href=\"{reset_link}\">Choose a new password</a></p>"
            "<p>If you did not ask for this, you can ignore this e-mail.</p>"
            "</body></html>"
        )
        return self.send(to, "Reset your SubTracker password", html)


email_service = EmailService()

"""
Transactional email through the Mailjet v3.1 send API.
"""

import logging
from typing import Any, Dict, Optional

import requests

from booktalk.core.config import MailjetSettings
from booktalk.core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "It would be wonderful to discuss this book together!"
DEFAULT_HTML = (
    "<h3>Hi! We're excited to dive into our discussion. <br>"
    "Whether you've already started reading or are just about to pick it up, "
    "we'd love for you to join the conversation!</h3>"
)


class MailjetMailer:
    """Sends single messages through Mailjet."""

    def __init__(self, settings: MailjetSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        if not settings.configured:
            logger.warning("MAILJET_API_KEY and/or MAILJET_API_SECRET are not set; email sending is disabled")

    def build_message(self, to_email: str, subject: str, text_content: str = '', html_content: str = '') -> Dict[str, Any]:
        return {
            'Messages': [
                {
                    'From': {
                        'Email': self.settings.sender_email,
                        'Name': self.settings.sender_name,
                    },
                    'To': [{'Email': to_email}],
                    'Subject': subject,
                    'TextPart': text_content,
                    'HTMLPart': html_content,
                }
            ]
        }

    def _post(self, message: Dict[str, Any]) -> requests.Response:
        return self.session.post(
            f"{self.settings.base_url}/send",
            auth=(self.settings.api_key, self.settings.api_secret),
            json=message,
            timeout=self.settings.timeout
        )

    def send(self, to_email: str, subject: str, text_content: str = '', html_content: str = '') -> Dict[str, Any]:
        """Send one message and return Mailjet's response body.

        Raises EmailDeliveryError when the service is unconfigured, unreachable
        or rejects the message.
        """
        if not self.settings.configured:
            raise EmailDeliveryError("Email service is not configured")

        try:
            response = self._post(self.build_message(to_email, subject, text_content, html_content))
        except requests.RequestException as e:
            logger.error(f"Mailjet request failed: {e}")
            raise EmailDeliveryError("Failed to send email") from e

        if response.status_code >= 400:
            logger.error(f"Mailjet rejected message to {to_email}: {response.status_code} {response.text[:200]}")
            raise EmailDeliveryError("Failed to send email")

        logger.info(f"Email sent to {to_email}")
        return response.json()

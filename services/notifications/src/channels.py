"""
Delivery channels: mail (SMTP), SMS (Twilio REST gateway) and in-app records.

``send`` returns True when something was delivered and False when the
recipient has no address on that channel (or there is nothing to say), which
is a silent skip rather than an error.
"""
import base64
import json
import logging
import smtplib
import time
import urllib.error
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any, Dict, Optional

from shared.models.user import User
from shared.utils.config import Settings, get_settings

from .exceptions import ConfigurationError, DeliveryError
from .messages import SmsMessage
from .notifications import IN_APP, MAIL, SMS, Notification

logger = logging.getLogger(__name__)


class NotificationChannel(ABC):
    """A way of reaching a recipient."""

    name: str = ""

    @abstractmethod
    def send(self, recipient: User, notification: Notification) -> bool:
        """Deliver ``notification`` to ``recipient``; False means skipped."""


class MailChannel(NotificationChannel):
    """Plain-text mail over SMTP (STARTTLS + login when configured)."""

    name = MAIL

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_username
        self.password = settings.smtp_password
        self.use_tls = settings.smtp_use_tls
        self.from_address = settings.mail_from_address
        self.from_name = settings.mail_from_name
        self.timeout = settings.mail_timeout

    def send(self, recipient: User, notification: Notification) -> bool:
        if not recipient.email:
            logger.debug(f"User {recipient.id} has no email address; skipping mail")
            return False
        if not self.from_address:
            raise ConfigurationError("Mail from address is not configured.")

        message = notification.to_mail(recipient)
        email = EmailMessage()
        email["Subject"] = message.subject
        email["From"] = formataddr((self.from_name, self.from_address))
        email["To"] = recipient.email
        email.set_content(message.render_text())

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(self.name, f"SMTP send to user {recipient.id} failed: {e}") from e

        logger.debug(f"Sent {notification.kind} mail to user {recipient.id}")
        return True


class SmsChannel(NotificationChannel):
    """
    SMS through the Twilio Messages REST endpoint.

    Form-encoded POST of To/From/Body (and StatusCallback when set) with HTTP
    basic auth. 429, 5xx and network errors are retried a few times with
    exponential backoff before giving up with DeliveryError.
    """

    name = SMS
    RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
    BACKOFF_SECONDS = 1.0

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.account_sid = settings.twilio_account_sid
        self.auth_token = settings.twilio_auth_token
        self.from_number = settings.twilio_from_number
        self.status_callback_url = settings.twilio_status_callback_url
        self.base_url = settings.twilio_base_url.rstrip("/")
        self.timeout = settings.sms_timeout
        self.max_retries = settings.sms_max_retries

    def send(self, recipient: User, notification: Notification) -> bool:
        phone = recipient.sms_route
        if not phone:
            logger.debug(f"User {recipient.id} has no SMS route; skipping sms")
            return False

        message = notification.to_sms(recipient)
        if message is None:
            return False
        if not isinstance(message, SmsMessage):
            message = SmsMessage(str(message))
        if message.status_callback is None and self.status_callback_url:
            message.status_callback = self.status_callback_url

        payload = message.to_payload()
        if not payload.get("Body"):
            return False

        if not self.from_number:
            raise ConfigurationError("Twilio from number is not configured.")
        if not self.account_sid or not self.auth_token:
            raise ConfigurationError("Twilio credentials are not configured.")

        payload["To"] = phone
        payload["From"] = self.from_number
        self._post(payload)
        logger.debug(f"Sent {notification.kind} sms to user {recipient.id}")
        return True

    def _post(self, payload: Dict[str, str], _retries: int = 0) -> Dict[str, Any]:
        """
        POST one message to the gateway.

        Args:
            payload: Form fields (To, From, Body, StatusCallback)
            _retries: Internal retry counter (do not set manually)

        Returns:
            Gateway response as dictionary (empty if the body is not JSON)
        """
        url = f"{self.base_url}/Accounts/{self.account_sid}/Messages.json"
        credentials = base64.b64encode(
            f"{self.account_sid}:{self.auth_token}".encode()
        ).decode()
        request = urllib.request.Request(
            url,
            data=urllib.parse.urlencode(payload).encode(),
            headers={
                "Authorization": f"Basic {credentials}",
                "Content-Type": "application/x-www-form-urlencoded",
            },
            method="POST",
        )

        try:
            response = urllib.request.urlopen(request, timeout=self.timeout)
            body = response.read()
        except urllib.error.HTTPError as e:
            if e.code in self.RETRY_STATUS_CODES and _retries < self.max_retries:
                self._backoff(_retries, f"HTTP {e.code}")
                return self._post(payload, _retries=_retries + 1)
            logger.error(f"SMS gateway HTTP Error {e.code}: {e.reason}")
            raise DeliveryError(self.name, f"HTTP Error {e.code}: {e.reason}", status_code=e.code) from e
        except (urllib.error.URLError, OSError) as e:
            if _retries < self.max_retries:
                self._backoff(_retries, str(e))
                return self._post(payload, _retries=_retries + 1)
            logger.error(f"SMS gateway request failed: {e}")
            raise DeliveryError(self.name, f"Request failed: {e}") from e

        try:
            return json.loads(body) if body else {}
        except json.JSONDecodeError:
            return {}

    def _backoff(self, attempt: int, reason: str) -> None:
        wait = self.BACKOFF_SECONDS * (2 ** attempt)
        logger.warning(
            f"SMS gateway error ({reason}), waiting {wait}s (retry {attempt + 1}/{self.max_retries})..."
        )
        time.sleep(wait)


class InAppChannel(NotificationChannel):
    """Durable notification record shown in the recipient's notification centre."""

    name = IN_APP
    TABLE = "notifications"

    def __init__(self, supabase_client):
        self.supabase = supabase_client

    def send(self, recipient: User, notification: Notification) -> bool:
        row = {
            "type": notification.kind,
            "notifiable_id": recipient.id,
            "data": notification.to_in_app(recipient),
            "read_at": None,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.supabase.table(self.TABLE).insert(row).execute()
        return True

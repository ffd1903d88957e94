"""
Notification types: what each one says on every channel it is sent over.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from shared.models.bill import Bill
from shared.models.engagement import CitizenEngagement
from shared.models.user import User

from .messages import MailMessage, SmsMessage

MAIL = "mail"
SMS = "sms"
IN_APP = "in_app"


def bill_url(app_url: str, bill_id: Optional[int]) -> str:
    return f"{app_url.rstrip('/')}/bills/{bill_id}"


def _long_date(value: date) -> str:
    return f"{value.day} {value:%b %Y}"


def _short_date(value: date) -> str:
    return f"{value.day} {value:%b}"


class Notification(ABC):
    """
    Base class for notifications.

    ``channels`` is the ordered list of channels the dispatcher delivers on;
    subclasses render a message for each channel they declare.
    """

    kind: str = ""
    channels: Tuple[str, ...] = ()

    def via(self, recipient: User) -> List[str]:
        return list(self.channels)

    @property
    @abstractmethod
    def subject_id(self) -> Optional[int]:
        """Id of the record this notification is about (used to rebuild it in retry jobs)."""

    @abstractmethod
    def to_mail(self, recipient: User) -> MailMessage:
        """Mail version of the notification."""

    @abstractmethod
    def to_sms(self, recipient: User) -> Optional[SmsMessage]:
        """SMS version, or None when there is nothing to text."""

    @abstractmethod
    def to_in_app(self, recipient: User) -> Dict[str, Any]:
        """Row data for the in-app notifications table."""


class BillParticipationOpened(Notification):
    kind = "participation_opened"
    channels = (MAIL, SMS, IN_APP)

    def __init__(self, bill: Bill, app_url: str):
        self.bill = bill
        self.url = bill_url(app_url, bill.id)

    @property
    def subject_id(self) -> Optional[int]:
        return self.bill.id

    def to_mail(self, recipient: User) -> MailMessage:
        message = (
            MailMessage(subject=f"Commentary Open: {self.bill.title}", greeting=f"Hello {recipient.name}")
            .line("The commentary period for a bill you follow is now open.")
            .line(f"Bill: {self.bill.title} ({self.bill.bill_number})")
            .action("Share your feedback", self.url)
        )
        if self.bill.participation_end_date:
            message.line(f"Submissions close on {_long_date(self.bill.participation_end_date)}.")
        return message

    def to_sms(self, recipient: User) -> Optional[SmsMessage]:
        deadline = self.bill.participation_end_date
        parts = [
            "COMMENTARY OPEN:",
            self.bill.title,
            f"(closes {_short_date(deadline)})" if deadline else "",
            self.url,
        ]
        return SmsMessage(" ".join(part for part in parts if part).strip())

    def to_in_app(self, recipient: User) -> Dict[str, Any]:
        end = self.bill.participation_end_date
        return {
            "bill_id": self.bill.id,
            "title": self.bill.title,
            "bill_number": self.bill.bill_number,
            "participation_end_date": end.isoformat() if end else None,
            "type": self.kind,
        }


class BillParticipationClosed(Notification):
    kind = "participation_closed"
    channels = (MAIL, SMS, IN_APP)

    def __init__(self, bill: Bill, app_url: str):
        self.bill = bill
        self.url = bill_url(app_url, bill.id)

    @property
    def subject_id(self) -> Optional[int]:
        return self.bill.id

    def to_mail(self, recipient: User) -> MailMessage:
        return (
            MailMessage(subject=f"Commentary Closed: {self.bill.title}", greeting=f"Hello {recipient.name}")
            .line("The commentary period for a bill you follow has closed.")
            .line(f"Bill: {self.bill.title} ({self.bill.bill_number})")
            .line("Submissions received are now with the committee for consideration.")
            .action("View the bill", self.url)
        )

    def to_sms(self, recipient: User) -> Optional[SmsMessage]:
        return SmsMessage(f"COMMENTARY CLOSED: {self.bill.title} {self.url}".strip())

    def to_in_app(self, recipient: User) -> Dict[str, Any]:
        end = self.bill.participation_end_date
        return {
            "bill_id": self.bill.id,
            "title": self.bill.title,
            "bill_number": self.bill.bill_number,
            "participation_end_date": end.isoformat() if end else None,
            "type": self.kind,
        }


class NewEngagementMessage(Notification):
    """Tells a legislator a constituent has written to them."""

    kind = "engagement_message"
    channels = (MAIL, IN_APP)

    def __init__(
        self,
        engagement: CitizenEngagement,
        sender: User,
        app_url: str,
        bill: Optional[Bill] = None,
    ):
        self.engagement = engagement
        self.sender = sender
        self.bill = bill
        self.url = f"{app_url.rstrip('/')}/engagements/{engagement.id}"

    @property
    def subject_id(self) -> Optional[int]:
        return self.engagement.id

    def to_mail(self, recipient: User) -> MailMessage:
        message = MailMessage(subject="New Message from Constituent").line(
            f"You have received a new message from {self.sender.name}."
        )
        if self.bill:
            message.line(f"Regarding: {self.bill.title}")
        return (
            message.line(f"Subject: {self.engagement.subject}")
            .action("View Message", self.url)
            .line("Thank you for your service!")
        )

    def to_sms(self, recipient: User) -> Optional[SmsMessage]:
        return None

    def to_in_app(self, recipient: User) -> Dict[str, Any]:
        sent_at = self.engagement.sent_at
        return {
            "engagement_id": self.engagement.id,
            "sender_id": self.engagement.sender_id,
            "sender_name": self.sender.name,
            "bill_id": self.engagement.bill_id,
            "bill_title": self.bill.title if self.bill else None,
            "subject": self.engagement.subject,
            "message": self.engagement.message,
            "sent_at": sent_at.isoformat() if sent_at else None,
            "type": self.kind,
        }

"""
Channel-specific message payloads built by notifications.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class SmsMessage:
    """Body (and optional delivery-status callback) of an outbound SMS."""
    content: str
    status_callback: Optional[str] = None

    def to_payload(self) -> Dict[str, str]:
        """Gateway form fields, with unset values left out."""
        payload = {"Body": self.content, "StatusCallback": self.status_callback}
        return {key: value for key, value in payload.items() if value is not None}


@dataclass
class MailMessage:
    subject: str
    greeting: Optional[str] = None
    lines: List[str] = field(default_factory=list)
    action_text: Optional[str] = None
    action_url: Optional[str] = None

    def line(self, text: str) -> "MailMessage":
        self.lines.append(text)
        return self

    def action(self, text: str, url: str) -> "MailMessage":
        self.action_text = text
        self.action_url = url
        return self

    def render_text(self) -> str:
        """Plain-text body."""
        parts = []
        if self.greeting:
            parts.append(f"{self.greeting},")
        parts.extend(self.lines)
        if self.action_text and self.action_url:
            parts.append(f"{self.action_text}: {self.action_url}")
        return "\n\n".join(parts)

"""
Fan a notification out over the channels it declares.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Mapping, Optional

from shared.models.user import User

from .channels import NotificationChannel
from .exceptions import ConfigurationError
from .notifications import Notification

logger = logging.getLogger(__name__)


class DeliveryStatus(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ChannelResult:
    channel: str
    status: DeliveryStatus
    error: Optional[str] = None


@dataclass
class DispatchResult:
    """Per-channel outcome of sending one notification to one recipient."""
    recipient_id: int
    notification_kind: str
    results: List[ChannelResult] = field(default_factory=list)

    @property
    def failed_channels(self) -> List[str]:
        return [r.channel for r in self.results if r.status == DeliveryStatus.FAILED]

    @property
    def sent_channels(self) -> List[str]:
        return [r.channel for r in self.results if r.status == DeliveryStatus.SENT]

    @property
    def ok(self) -> bool:
        return not self.failed_channels


class NotificationDispatcher:
    """
    Delivers notifications channel by channel.

    Each channel is independent: a failing channel is recorded in the result
    and the remaining channels still run. ConfigurationError is the exception:
    it is raised immediately so a misconfigured deployment fails loudly.
    """

    def __init__(self, channels: Mapping[str, NotificationChannel]):
        self.channels = dict(channels)

    def send(
        self,
        recipient: User,
        notification: Notification,
        only: Optional[Iterable[str]] = None,
    ) -> DispatchResult:
        """
        Send ``notification`` to ``recipient``.

        Args:
            recipient: The user to notify
            notification: What to send
            only: Restrict delivery to these channel names (used by retries)

        Returns:
            DispatchResult with one ChannelResult per declared channel
        """
        wanted = set(only) if only is not None else None
        result = DispatchResult(recipient_id=recipient.id, notification_kind=notification.kind)

        for channel_name in notification.via(recipient):
            if wanted is not None and channel_name not in wanted:
                continue
            channel = self.channels.get(channel_name)
            if channel is None:
                logger.warning(f"No channel registered for '{channel_name}'; skipping")
                result.results.append(
                    ChannelResult(channel_name, DeliveryStatus.FAILED, "channel not registered")
                )
                continue
            try:
                delivered = channel.send(recipient, notification)
            except ConfigurationError:
                logger.critical(
                    f"Channel '{channel_name}' is misconfigured; aborting {notification.kind} dispatch"
                )
                raise
            except Exception as e:
                logger.error(
                    f"Failed to send {notification.kind} via {channel_name} to user {recipient.id}: {e}",
                    exc_info=True,
                )
                result.results.append(ChannelResult(channel_name, DeliveryStatus.FAILED, str(e)))
                continue
            status = DeliveryStatus.SENT if delivered else DeliveryStatus.SKIPPED
            result.results.append(ChannelResult(channel_name, status))

        return result

    def send_to_many(self, recipients: Iterable[User], notification: Notification) -> List[DispatchResult]:
        results = [self.send(recipient, notification) for recipient in recipients]
        failed = sum(1 for r in results if not r.ok)
        logger.info(
            f"Dispatched {notification.kind} to {len(results)} recipient(s); {failed} with failed channels"
        )
        return results

class NotificationError(Exception):
    """Base class for notification delivery errors."""


class ConfigurationError(NotificationError):
    """
    A channel is missing mandatory configuration (credentials, from address).

    Fatal: raised straight through the dispatcher and never retried, so the
    misconfiguration is surfaced to operators immediately.
    """


class DeliveryError(NotificationError):
    """A channel could not deliver after its own bounded retries (network, timeout, gateway error)."""

    def __init__(self, channel: str, message: str, status_code=None):
        self.channel = channel
        self.status_code = status_code
        super().__init__(f"{channel}: {message}")

from typing import Optional


class PingbotException(Exception):
    """Base exception for all pingbot errors."""
    pass

class ConfigurationException(PingbotException):
    """Raised when the configuration is missing or malformed."""
    pass

class TransportException(PingbotException):
    """Raised when a request fails to connect, times out or returns a non-2xx status."""
    def __init__(self, url: str, message: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        prefix = f"HTTP {status} " if status is not None else ""
        super().__init__(f"{prefix}{message} ({url})")

class DecodeException(PingbotException):
    """Raised when a response body does not match the expected schema."""
    pass

class NotificationException(PingbotException):
    """Raised when the notification sink rejects a message."""
    pass

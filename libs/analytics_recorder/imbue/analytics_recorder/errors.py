from pathlib import Path


class BaseAnalyticsError(Exception):
    """Base exception for all analytics recorder errors."""


class AnalyticsIOError(BaseAnalyticsError):
    """Raised when reading or writing the analytics cache directory fails.

    These errors are fatal for the current operation: nothing is retried and no
    fallback value is substituted, since a half-written identity or event would
    silently corrupt the analytics stream.
    """

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")


class ClientIdentityError(AnalyticsIOError):
    """Raised when the client identity file cannot be created or read."""


class EventWriteError(AnalyticsIOError):
    """Raised when an event file cannot be written."""


class EventParseError(BaseAnalyticsError, ValueError):
    """Raised when an event document does not have the expected shape."""


class InvalidEventNameError(BaseAnalyticsError, ValueError):
    """Raised when an event name is empty."""


class InvalidNamespaceError(BaseAnalyticsError, ValueError):
    """Raised when a cache namespace would escape the analytics cache directory."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        super().__init__(f"Namespace must be a single directory name, got: {namespace!r}")

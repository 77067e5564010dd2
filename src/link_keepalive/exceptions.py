"""Exception hierarchy for link-keepalive."""

from typing import Optional


class KeepAliveError(Exception):
    """Base class for all keep-alive errors."""


class ConfigurationError(KeepAliveError):
    """Configuration is missing or invalid; raised before any network activity."""


class ProbeError(KeepAliveError):
    """A target page could not be probed for download links."""


class VerificationError(KeepAliveError):
    """A download link did not serve its first bytes."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BrowserUnavailableError(KeepAliveError):
    """The browser could not be launched or recovered."""


class NoSuccessfulVerificationsError(KeepAliveError):
    """Download links were found but none of them could be verified."""

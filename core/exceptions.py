"""
Custom exception hierarchy for hcaptcha-watch.
Callers can tell a transient failure (retry next interval) from a change
in the remote format (needs a code update) through the `retryable` flag.
"""


class MonitorException(Exception):
    """Base exception for all monitor-related errors."""

    retryable = False

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    @property
    def stage(self):
        return self.details.get("stage")


# =============================================================================
# Scraper Exceptions
# =============================================================================


class ScraperException(MonitorException):
    """Base exception for fetching and decoding errors."""

    pass


class NetworkException(ScraperException):
    """Request failed or returned a non-success status."""

    retryable = True


class ParsingException(ScraperException):
    """Malformed JSON or an expected text pattern was not found."""

    pass


class VersionNotFoundException(ParsingException):
    """The bootstrap script no longer embeds a recognisable version."""

    pass


class MissingFieldException(ScraperException):
    """An expected JSON key is absent or has the wrong type."""

    pass


class MalformedTokenException(ScraperException):
    """The signed token does not have a payload segment."""

    pass


class DecodeException(ScraperException):
    """Base64 decoding of the token payload failed."""

    pass


class Utf8DecodeException(DecodeException):
    """Decoded token payload is not valid UTF-8."""

    pass


# =============================================================================
# Filesystem Exceptions
# =============================================================================


class FilesystemException(MonitorException):
    """Directory or file creation/write failure."""

    pass


# =============================================================================
# Notification Exceptions
# =============================================================================


class NotificationException(MonitorException):
    """Base exception for notification delivery errors."""

    retryable = True


class WebhookException(NotificationException):
    """Exception for webhook-related errors."""

    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(MonitorException):
    """Exception for configuration errors."""

    pass


class MissingConfigException(ConfigurationException):
    """Exception when the configuration file does not exist."""

    pass

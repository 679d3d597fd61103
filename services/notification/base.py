"""
Notification System - Strategy Pattern Implementation

This module defines the abstract interface for notification channels.
"""
from abc import ABC, abstractmethod

import aiohttp

from models.result import CheckResult


class NotificationChannel(ABC):
    """
    Abstract base class for notification channels (Strategy Pattern).

    Usage:
        class SlackChannel(NotificationChannel):
            async def send_version(self, session, result):
                # Slack-specific implementation
                pass
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Returns the name of this notification channel (e.g., 'discord')."""
        pass

    @abstractmethod
    async def send_version(self, session: aiohttp.ClientSession, result: CheckResult) -> None:
        """
        Announce a newly detected version.

        Raises:
            NotificationException: if delivery failed
        """
        pass

    @abstractmethod
    def is_enabled(self) -> bool:
        """True if the channel has the configuration it needs to send."""
        pass

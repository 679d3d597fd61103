"""
Notification channels for newly detected versions.
"""

from services.notification import formatters
from services.notification.base import NotificationChannel
from services.notification.discord import DiscordNotifier

__all__ = ["formatters", "NotificationChannel", "DiscordNotifier"]

"""
Discord webhook notification channel.
"""
import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

from core.exceptions import WebhookException
from core.logger import get_logger
from models.result import CheckResult
from services.notification.base import NotificationChannel
from services.notification.formatters import create_version_embed, create_webhook_payload

logger = get_logger(__name__)


class DiscordNotifier(NotificationChannel):
    """Posts embeds to a Discord-compatible webhook endpoint."""

    def __init__(self, webhook_url: Optional[str]):
        self.webhook_url = webhook_url

    @property
    def channel_name(self) -> str:
        return "discord"

    def is_enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_embed(
        self,
        session: aiohttp.ClientSession,
        title: str,
        description: str,
        color: int,
        fields: List[Dict[str, Any]],
    ) -> None:
        """
        Sends a single embed message.

        Raises:
            WebhookException: on transport failure or a non-success status
        """
        if not self.is_enabled():
            raise WebhookException("Webhook URL is not configured")

        payload = create_webhook_payload(title, description, color, fields)
        try:
            async with session.post(self.webhook_url, json=payload) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    raise WebhookException(
                        "Failed to send webhook",
                        {"status": resp.status, "body": body[:200]},
                    )
        except asyncio.TimeoutError as e:
            raise WebhookException("Timeout sending webhook") from e
        except aiohttp.ClientError as e:
            raise WebhookException("HTTP error sending webhook", {"error": str(e)}) from e

    async def send_version(self, session: aiohttp.ClientSession, result: CheckResult) -> None:
        embed = create_version_embed(result)
        await self.send_embed(
            session,
            embed["title"],
            embed["description"],
            embed["color"],
            embed["fields"],
        )
        logger.info(f"[NOTIFIER] Sent {self.channel_name} notification for {result.target.host}")

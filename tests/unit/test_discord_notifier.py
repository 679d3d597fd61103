"""
Unit tests for the Discord webhook notifier.
"""

import aiohttp
import pytest
from unittest.mock import Mock

from core.exceptions import NotificationException, WebhookException
from models.result import CheckResult
from services.notification.discord import DiscordNotifier
from tests.mocks import make_session

WEBHOOK_URL = "https://discord.com/api/webhooks/1/token"


class TestDiscordNotifier:
    """Test suite for DiscordNotifier"""

    @pytest.fixture
    def result(self, target):
        return CheckResult(
            target=target,
            version="deadbeef",
            resource_path="/deadbeef/abcdefg",
            archive_version="abcdefg",
            is_new=True,
        )

    def test_is_enabled(self):
        assert DiscordNotifier(WEBHOOK_URL).is_enabled()
        assert not DiscordNotifier(None).is_enabled()
        assert not DiscordNotifier("").is_enabled()

    @pytest.mark.asyncio
    async def test_send_version_posts_embed(self, result):
        session = make_session({}, post_status=204)

        await DiscordNotifier(WEBHOOK_URL).send_version(session, result)

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == WEBHOOK_URL
        embed = kwargs["json"]["embeds"][0]
        assert embed["description"] == "A new hCaptcha version has been detected for example.com."
        assert [f["name"] for f in embed["fields"]] == ["Website", "Site Key", "Version", "Resource"]

    @pytest.mark.asyncio
    async def test_send_embed_error_status(self):
        session = make_session({}, post_status=429)

        with pytest.raises(WebhookException) as exc_info:
            await DiscordNotifier(WEBHOOK_URL).send_embed(session, "t", "d", 1, [])

        assert exc_info.value.details["status"] == 429

    @pytest.mark.asyncio
    async def test_send_embed_transport_error(self):
        session = make_session({})
        session.post = Mock(side_effect=aiohttp.ClientConnectionError("dns failure"))

        with pytest.raises(NotificationException):
            await DiscordNotifier(WEBHOOK_URL).send_embed(session, "t", "d", 1, [])

    @pytest.mark.asyncio
    async def test_send_embed_without_url(self):
        session = make_session({})

        with pytest.raises(WebhookException):
            await DiscordNotifier(None).send_embed(session, "t", "d", 1, [])

        session.post.assert_not_called()

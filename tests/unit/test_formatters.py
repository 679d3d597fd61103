"""
Unit tests for notification formatters.
"""

from core import constants
from models.result import ArchiveResult, CheckResult
from services.notification import formatters


class TestFormatters:
    """Test suite for notification formatters"""

    def _result(self, target, assets=None):
        return CheckResult(
            target=target,
            version="deadbeef",
            resource_path="/deadbeef/abcdefg",
            archive_version="abcdefg",
            is_new=True,
            assets=assets or [],
        )

    def test_truncate_text(self):
        assert formatters.truncate_text("short", 10) == "short"
        assert formatters.truncate_text("a" * 20, 10) == "aaaaaaa..."
        assert len(formatters.truncate_text("a" * 2000, 1024)) == 1024

    def test_markdown_link(self):
        assert formatters.markdown_link("/a/b", "https://x/a/b") == "[/a/b](https://x/a/b)"
        assert formatters.markdown_link("[x]", "u") == "[(x)](u)"

    def test_embed_field_placeholder_for_empty_value(self):
        assert formatters.embed_field("Name", "")["value"] == "-"

    def test_create_version_embed(self, target):
        embed = formatters.create_version_embed(self._result(target))

        assert "example.com" in embed["title"]
        assert embed["color"] == constants.NEW_VERSION_COLOR
        fields = {f["name"]: f["value"] for f in embed["fields"]}
        assert fields["Website"] == "example.com"
        assert fields["Site Key"] == "abc"
        assert fields["Version"] == "abcdefg"
        assert fields["Resource"] == (
            "[/deadbeef/abcdefg](https://newassets.hcaptcha.com/deadbeef/abcdefg)"
        )
        assert "Archived Files" not in fields

    def test_create_version_embed_lists_assets(self, target):
        assets = [
            ArchiveResult(asset_name="a.js", url="https://x/a.js", path="/tmp/a.js"),
            ArchiveResult(asset_name="b.js", url="https://x/b.js", error="HTTP 404"),
        ]
        embed = formatters.create_version_embed(self._result(target, assets))

        summary = embed["fields"][-1]
        assert summary["name"] == "Archived Files"
        assert "✅ [a.js](https://x/a.js)" in summary["value"]
        assert "❌ b.js" in summary["value"]

    def test_create_webhook_payload(self):
        payload = formatters.create_webhook_payload(
            "Title", "Desc", 0x123456, [{"name": "n", "value": "v", "inline": True}],
            timestamp="2024-01-01T00:00:00+00:00",
        )

        assert payload["username"] == constants.NOTIFIER_USERNAME
        assert len(payload["embeds"]) == 1
        embed = payload["embeds"][0]
        assert embed["title"] == "Title"
        assert embed["description"] == "Desc"
        assert embed["color"] == 0x123456
        assert embed["timestamp"] == "2024-01-01T00:00:00+00:00"
        assert embed["fields"][0]["name"] == "n"

    def test_create_webhook_payload_default_timestamp(self):
        payload = formatters.create_webhook_payload("T", "D", 1, [])
        assert payload["embeds"][0]["timestamp"].endswith("+00:00")

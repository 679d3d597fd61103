"""
Message formatting utilities for notifications.
Builds the embed payload announcing a new hCaptcha version.
"""

from typing import Any, Dict, List, Optional, Sequence

from core import constants
from core.utils import get_utc_now
from models.result import ArchiveResult, CheckResult


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """Truncate text to max length with suffix."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix


def markdown_link(label: str, url: str) -> str:
    # Square brackets in the label would end the link text early
    safe_label = label.replace("[", "(").replace("]", ")")
    return f"[{safe_label}]({url})"


def embed_field(name: str, value: str, inline: bool = True) -> Dict[str, Any]:
    return {
        "name": name,
        "value": truncate_text(value or "-", constants.DISCORD_MAX_FIELD_LENGTH),
        "inline": inline,
    }


def format_asset_summary(assets: Sequence[ArchiveResult]) -> str:
    """One line per asset, marking failed downloads."""
    lines = []
    for asset in assets:
        if asset.ok:
            lines.append(f"✅ {markdown_link(asset.asset_name, asset.url)}")
        else:
            lines.append(f"❌ {asset.asset_name}")
    return "\n".join(lines)


def create_version_embed(result: CheckResult) -> Dict[str, Any]:
    """
    Create the embed describing a newly detected version.

    Args:
        result: CheckResult of the target that changed

    Returns:
        Embed dict with title, description, color and fields
    """
    target = result.target
    resource_url = f"{constants.ASSET_HOST}{result.resource_path}"

    fields: List[Dict[str, Any]] = [
        embed_field("Website", target.host),
        embed_field("Site Key", target.site_key),
        embed_field("Version", result.archive_version),
        embed_field("Resource", markdown_link(result.resource_path, resource_url), inline=False),
    ]
    if result.assets:
        fields.append(embed_field("Archived Files", format_asset_summary(result.assets), inline=False))

    return {
        "title": truncate_text(
            f"🆕 hCaptcha version changed for {target.host}", constants.DISCORD_MAX_TITLE_LENGTH
        ),
        "description": f"A new hCaptcha version has been detected for {target.host}.",
        "color": constants.NEW_VERSION_COLOR,
        "fields": fields,
    }


def create_webhook_payload(
    title: str,
    description: str,
    color: int,
    fields: List[Dict[str, Any]],
    timestamp: Optional[str] = None,
) -> Dict[str, Any]:
    """Wraps a single embed into a webhook message body."""
    return {
        "username": constants.NOTIFIER_USERNAME,
        "avatar_url": constants.NOTIFIER_AVATAR_URL,
        "embeds": [
            {
                "title": title,
                "description": description,
                "color": color,
                "thumbnail": {"url": constants.NOTIFIER_AVATAR_URL},
                "timestamp": timestamp or get_utc_now().isoformat(),
                "fields": fields,
            }
        ],
    }

"""
ResourceLocator component.

Exchanges a version identifier for the site config of a target, then
decodes the payload of the signed `c.req` token to recover the resource
path of the current asset bundle. The token signature is not verified,
only its payload is read.
"""
import base64
import binascii
import json
from enum import Enum
from typing import Any, Dict

import aiohttp

from core import constants
from core.config import settings
from core.exceptions import (
    DecodeException,
    MalformedTokenException,
    MissingFieldException,
    MonitorException,
    ParsingException,
    Utf8DecodeException,
)
from core.logger import get_logger
from models.target import Target
from services.scraper.fetcher import AssetFetcher

logger = get_logger(__name__)

_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


class LocatorStage(Enum):
    """Stages of resource path resolution, in order."""

    FETCH = "fetch"
    PARSE_RESPONSE = "parse_response"
    EXTRACT_TOKEN = "extract_token"
    SPLIT_TOKEN = "split_token"
    DECODE_BASE64 = "decode_base64"
    DECODE_UTF8 = "decode_utf8"
    PARSE_PAYLOAD = "parse_payload"
    EXTRACT_PATH = "extract_path"


def pad_base64(payload: str) -> str:
    """
    Pads a base64 string whose trailing `=` were stripped.

    A remainder of 1 cannot come from valid base64 and is left as is,
    decoding then fails.
    """
    remainder = len(payload) % 4
    if remainder == 2:
        return payload + "=="
    if remainder == 3:
        return payload + "="
    return payload


def decode_token_payload(token: str) -> Dict[str, Any]:
    """
    Decodes the middle segment of a `header.payload.signature` token.

    Raises:
        MalformedTokenException: token has no payload segment
        DecodeException: payload is not base64
        Utf8DecodeException: decoded bytes are not UTF-8
        ParsingException: decoded text is not JSON
    """
    parts = token.split(".")
    if len(parts) < 2:
        raise MalformedTokenException(
            "Failed to extract payload from token",
            {"stage": LocatorStage.SPLIT_TOKEN.value, "parts": len(parts)},
        )

    padded = pad_base64(parts[1]).translate(_URLSAFE_TO_STANDARD)
    try:
        raw = base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeException(
            "Failed to decode token payload as base64",
            {"stage": LocatorStage.DECODE_BASE64.value, "error": str(e)},
        ) from e

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise Utf8DecodeException(
            "Token payload is not valid UTF-8",
            {"stage": LocatorStage.DECODE_UTF8.value, "error": str(e)},
        ) from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParsingException(
            "Failed to parse token payload as JSON",
            {"stage": LocatorStage.PARSE_PAYLOAD.value, "error": str(e)},
        ) from e


def extract_resource_path(body: str) -> str:
    """
    Runs every offline stage on a checksiteconfig response body and returns
    the resource path held in the token's `l` field.
    """
    try:
        config = json.loads(body)
    except json.JSONDecodeError as e:
        raise ParsingException(
            "Failed to parse checksiteconfig response",
            {"stage": LocatorStage.PARSE_RESPONSE.value, "error": str(e)},
        ) from e

    token = None
    if isinstance(config, dict) and isinstance(config.get("c"), dict):
        token = config["c"].get("req")
    if not isinstance(token, str):
        raise MissingFieldException(
            "Failed to extract 'c.req' from checksiteconfig response",
            {"stage": LocatorStage.EXTRACT_TOKEN.value},
        )

    payload = decode_token_payload(token)

    resource_path = payload.get("l") if isinstance(payload, dict) else None
    if not isinstance(resource_path, str):
        raise MissingFieldException(
            "Failed to extract 'l' from token payload",
            {"stage": LocatorStage.EXTRACT_PATH.value},
        )
    return resource_path


class ResourceLocator:
    """Resolves the resource path of the asset bundle for a target and version."""

    def __init__(self, fetcher: AssetFetcher = None):
        self.fetcher = fetcher or AssetFetcher()

    async def resolve(
        self, session: aiohttp.ClientSession, target: Target, version: str
    ) -> str:
        """
        Raises a MonitorException subclass whose `stage` names the failing step.
        """
        params = {"v": version, "host": target.host, "sitekey": target.site_key}
        headers = {"User-Agent": settings.USER_AGENT}

        try:
            body = await self.fetcher.fetch_text(
                session, constants.CHECKSITECONFIG_URL, params=params, headers=headers
            )
        except MonitorException as e:
            e.details["stage"] = LocatorStage.FETCH.value
            raise

        try:
            resource_path = extract_resource_path(body)
        except MonitorException as e:
            e.details["host"] = target.host
            raise

        logger.debug(f"[LOCATOR] {target.host} resolved to {resource_path}")
        return resource_path

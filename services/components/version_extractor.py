"""
VersionExtractor component for reading the hCaptcha release identifier
out of the api.js bootstrap script.
"""
import re

import aiohttp

from core import constants
from core.exceptions import VersionNotFoundException
from core.logger import get_logger
from services.scraper.fetcher import AssetFetcher

logger = get_logger(__name__)

VERSION_RE = re.compile(constants.VERSION_PATTERN)


def extract_version(script_body: str) -> str:
    """
    Returns the first hex run found between `/captcha/v1/` and `/static`.

    Raises:
        VersionNotFoundException: if the script no longer contains the pattern
    """
    match = VERSION_RE.search(script_body)
    if not match:
        raise VersionNotFoundException(
            "Failed to extract hCaptcha version",
            {"pattern": constants.VERSION_PATTERN, "body_length": len(script_body)},
        )
    return match.group(1)


class VersionExtractor:
    """Fetches the bootstrap script and extracts the current version."""

    def __init__(self, fetcher: AssetFetcher = None):
        self.fetcher = fetcher or AssetFetcher()

    async def fetch_version(self, session: aiohttp.ClientSession) -> str:
        body = await self.fetcher.fetch_text(
            session, constants.API_SCRIPT_URL, params=constants.API_SCRIPT_PARAMS
        )
        version = extract_version(body)
        logger.debug(f"[VERSION] Bootstrap script reports version {version}")
        return version

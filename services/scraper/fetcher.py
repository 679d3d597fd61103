import aiohttp
import asyncio
from typing import Dict, Optional
from core.config import settings
from core.logger import get_logger
from core.exceptions import NetworkException

logger = get_logger(__name__)


class AssetFetcher:
    """
    Handles network operations for the bootstrap script, site config and asset files.
    """
    def __init__(self, timeout: Optional[int] = None):
        total = timeout or settings.REQUEST_TIMEOUT
        self.timeout = aiohttp.ClientTimeout(total=total, connect=10)
        self.headers = {
            "User-Agent": settings.USER_AGENT,
            "Accept": "*/*",
            "Accept-Language": "en-US,en;q=0.9",
        }

    async def create_session(self) -> aiohttp.ClientSession:
        """Creates and returns a new aiohttp session."""
        return aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)

    async def fetch_text(
        self,
        session: aiohttp.ClientSession,
        url: str,
        params: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Fetches a URL and returns the decoded body.
        Raises NetworkException on transport errors and non-success statuses.
        """
        try:
            async with session.get(url, params=params, headers=headers) as resp:
                resp.raise_for_status()
                # Lossy decode, invalid bytes become U+FFFD
                return await resp.text(errors="replace")
        except asyncio.TimeoutError:
            raise NetworkException(f"Timeout fetching {url}", {"url": url})
        except aiohttp.ClientResponseError as e:
            raise NetworkException(
                f"HTTP {e.status} fetching {url}", {"url": url, "status": e.status}
            )
        except aiohttp.ClientError as e:
            raise NetworkException(f"HTTP error fetching {url}", {"url": url, "error": str(e)})

    async def fetch_bytes(self, session: aiohttp.ClientSession, url: str) -> bytes:
        """
        Downloads a file fully and returns the raw bytes.
        """
        try:
            async with session.get(url) as resp:
                resp.raise_for_status()
                return await resp.read()
        except asyncio.TimeoutError:
            raise NetworkException(f"Timeout downloading {url}", {"url": url})
        except aiohttp.ClientResponseError as e:
            raise NetworkException(
                f"HTTP {e.status} downloading {url}", {"url": url, "status": e.status}
            )
        except aiohttp.ClientError as e:
            raise NetworkException(f"Download failed for {url}", {"url": url, "error": str(e)})

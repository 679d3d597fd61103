"""
AssetArchiver component for downloading a version's script files.
"""
from pathlib import Path
from typing import List, Sequence

import aiohttp

from core import constants
from core.exceptions import FilesystemException, MonitorException
from core.logger import get_logger
from models.result import ArchiveResult
from services.scraper.fetcher import AssetFetcher

logger = get_logger(__name__)


def build_asset_url(resource_path: str, asset_name: str) -> str:
    return f"{constants.ASSET_HOST}{resource_path}/{asset_name}"


def write_asset(path: Path, url: str, content: bytes) -> None:
    """
    Writes `content` preceded by a provenance comment, replacing any existing file.
    """
    header = constants.PROVENANCE_TEMPLATE.format(url=url).encode("utf-8")
    try:
        path.write_bytes(header + content)
    except OSError as e:
        raise FilesystemException(
            "Failed to write asset file", {"path": str(path), "error": str(e)}
        ) from e


class AssetArchiver:
    """
    Downloads each configured asset into a version directory.
    A failing asset is reported in its result and does not stop the others.
    """

    def __init__(self, fetcher: AssetFetcher = None):
        self.fetcher = fetcher or AssetFetcher()

    async def archive(
        self,
        session: aiohttp.ClientSession,
        resource_path: str,
        asset_names: Sequence[str],
        target_dir: Path,
    ) -> List[ArchiveResult]:
        results = []
        for name in asset_names:
            url = build_asset_url(resource_path, name)
            path = Path(target_dir) / name
            try:
                content = await self.fetcher.fetch_bytes(session, url)
                write_asset(path, url, content)
            except MonitorException as e:
                logger.warning(f"[ARCHIVER] Error downloading {name}: {e}")
                results.append(ArchiveResult(asset_name=name, url=url, error=str(e)))
                continue

            logger.info(f"[ARCHIVER] Downloaded {name} to {path}")
            results.append(ArchiveResult(asset_name=name, url=url, path=path))
        return results

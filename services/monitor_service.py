from pathlib import Path
from typing import Callable, List, Optional

import aiohttp

from core.config import MonitorConfig, settings
from core.exceptions import FilesystemException, MonitorException, NotificationException
from core.logger import get_logger
from core.performance import get_performance_monitor
from models.result import CheckResult
from models.target import Target
from services.components import AssetArchiver, ChangeDetector, ResourceLocator, VersionExtractor
from services.notification import DiscordNotifier, NotificationChannel
from services.scraper.fetcher import AssetFetcher

logger = get_logger(__name__)


class MonitorService:
    """
    Runs poll cycles over all configured targets, one target at a time.
    """

    def __init__(
        self,
        config: MonitorConfig,
        output_dir: Optional[str] = None,
        fetcher: Optional[AssetFetcher] = None,
        notifier: Optional[NotificationChannel] = None,
    ):
        self.config = config
        self.output_dir = Path(output_dir or settings.OUTPUT_DIR)

        self.fetcher = fetcher or AssetFetcher()
        self.extractor = VersionExtractor(self.fetcher)
        self.locator = ResourceLocator(self.fetcher)
        self.detector = ChangeDetector(self.output_dir)
        self.archiver = AssetArchiver(self.fetcher)
        self.notifier = notifier or DiscordNotifier(config.notification_endpoint)

    @property
    def targets(self) -> List[Target]:
        return self.config.websites

    def prepare_output(self) -> None:
        """
        Creates the output root and one directory per website.

        Raises:
            FilesystemException: the monitor cannot run without its output root
        """
        for path in [self.output_dir] + [self.output_dir / t.host for t in self.targets]:
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemException(
                    "Failed to create output directory", {"path": str(path), "error": str(e)}
                ) from e
        logger.info(f"[MONITOR] Output directory ready at {self.output_dir}")

    async def run(self, should_stop: Optional[Callable[[], bool]] = None) -> List[CheckResult]:
        """
        Performs one poll cycle. A failing target is logged and skipped.
        Returns the results of the targets that completed.
        """
        results = []
        session = await self.fetcher.create_session()
        async with session:
            monitor = get_performance_monitor()
            logger.info(f"[MONITOR] Processing {len(self.targets)} targets sequentially...")
            for target in self.targets:
                if should_stop and should_stop():
                    logger.info("[MONITOR] Stop requested, ending cycle early")
                    break

                context = {"host": target.host, "sitekey": target.site_key}
                try:
                    with monitor.measure("check_target", context):
                        results.append(await self.process_target(session, target))
                except MonitorException as e:
                    kind = "Transient error" if e.retryable else "Error"
                    logger.error(
                        f"[MONITOR] {kind} checking {target.host}: {type(e).__name__}: {e}",
                        context=context,
                    )
                except Exception as e:
                    logger.error(
                        f"[MONITOR] Unexpected error checking {target.host}: {e}",
                        context=context,
                        exc_info=True,
                    )

        monitor.log_summary()
        monitor.reset()
        return results

    async def process_target(self, session: aiohttp.ClientSession, target: Target) -> CheckResult:
        logger.info(f"[MONITOR] Locating version for {target}")

        version = await self.extractor.fetch_version(session)
        resource_path = await self.locator.resolve(session, target, version)
        archive_version = self.detector.version_segment(resource_path)

        if archive_version != version:
            # The archive is keyed on the resource path, the script version is informational
            logger.debug(
                f"[MONITOR] Script version {version} differs from resource version {archive_version}"
            )

        result = CheckResult(
            target=target,
            version=version,
            resource_path=resource_path,
            archive_version=archive_version,
        )

        if not self.detector.is_new_version(target, resource_path):
            logger.info(f"[MONITOR] hCaptcha version for {target.host} is unchanged: {archive_version}")
            return result

        result.is_new = True
        logger.info(f"[MONITOR] hCaptcha version for {target.host} has changed: {archive_version}")

        # Claimed before downloading so an interrupted run is not re-detected
        target_dir = self.detector.mark_archived(target, resource_path)

        logger.info(f"[MONITOR] Downloading hCaptcha contents for {target.host}")
        result.assets = await self.archiver.archive(
            session, resource_path, self.config.scripts, target_dir
        )
        if result.failed_assets:
            logger.warning(
                f"[MONITOR] {len(result.failed_assets)}/{len(result.assets)} files failed for {target.host}"
            )

        await self.notify(session, result)
        return result

    async def notify(self, session: aiohttp.ClientSession, result: CheckResult) -> None:
        """Sends the new-version notification. Failures are logged, never raised."""
        if not self.notifier.is_enabled():
            logger.debug(f"[MONITOR] {self.notifier.channel_name} disabled, skipping notification")
            return

        try:
            await self.notifier.send_version(session, result)
        except NotificationException as e:
            logger.warning(f"[MONITOR] Notification for {result.target.host} failed: {e}")
        except Exception as e:
            logger.warning(
                f"[MONITOR] Unexpected notification error for {result.target.host}: {e}",
                exc_info=True,
            )

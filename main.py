import asyncio
import signal
import sys
from typing import Optional

# 1. Setup Logging First (to capture config errors)
from core.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)

from core.config import MonitorConfig, load_monitor_config, settings
from core.exceptions import ConfigurationException, FilesystemException
from services.monitor_service import MonitorService


class Monitor:
    def __init__(self, config: MonitorConfig, output_dir: Optional[str] = None):
        self.config = config
        self.service = MonitorService(config, output_dir=output_dir)
        self.running = True
        self._stop_event: Optional[asyncio.Event] = None

    def validate_startup(self) -> bool:
        """Validate configuration and prepare the output tree before starting"""
        logger.info("=" * 60)
        logger.info("hCaptcha Watch - Starting Up")
        logger.info("=" * 60)

        logger.info(f"Interval: {self.config.interval}s")
        logger.info(f"Configured downloads: {', '.join(self.config.scripts)}")
        logger.info(f"Loaded {len(self.config.websites)} websites")
        logger.info(f"Log Level: {settings.LOG_LEVEL}")

        for msg in self.config.validate_all():
            logger.warning(msg)

        try:
            self.service.prepare_output()
        except FilesystemException as e:
            logger.critical(f"Output directory setup failed: {e}")
            return False

        logger.info("[OK] Startup validation passed")
        return True

    def _install_signal_handlers(self):
        try:
            loop = asyncio.get_running_loop()
            if sys.platform != "win32":
                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.add_signal_handler(sig, self.stop)
            else:
                signal.signal(signal.SIGINT, lambda s, f: self.stop())
                signal.signal(signal.SIGTERM, lambda s, f: self.stop())
        except (NotImplementedError, RuntimeError, ValueError) as e:
            logger.warning(f"Could not set up signal handlers: {e}")

    async def start(self) -> int:
        if not self.validate_startup():
            logger.critical("Startup validation failed. Exiting...")
            return 1

        self._stop_event = asyncio.Event()
        if not self.running:
            self._stop_event.set()
        self._install_signal_handlers()

        logger.info(f"Checking on a {self.config.interval} second interval. Press Ctrl+C to stop.")
        logger.info("=" * 60)

        while self.running:
            await self.service.run(should_stop=lambda: not self.running)

            if self.running:
                logger.info(f"Sleeping for {self.config.interval}s...")
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self.config.interval)
                except asyncio.TimeoutError:
                    pass

        logger.info("Monitor stopped cleanly")
        return 0

    async def run_once(self) -> int:
        if not self.validate_startup():
            return 1
        await self.service.run()
        return 0

    def stop(self):
        if self.running:
            logger.info("=" * 60)
            logger.info("Stopping Monitor...")
            logger.info("=" * 60)
            self.running = False
        if self._stop_event is not None:
            self._stop_event.set()


def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="hCaptcha asset version monitor")
    parser.add_argument("--once", action="store_true", help="Run a single poll cycle and exit")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to the monitor config file (default: {settings.CONFIG_PATH})",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help=f"Archive output directory (default: {settings.OUTPUT_DIR})",
    )
    args = parser.parse_args(argv)

    try:
        config = load_monitor_config(args.config)
    except ConfigurationException as e:
        logger.critical(f"Failed to load configuration: {e}")
        return 1
    logger.info("Successfully loaded configuration")

    monitor = Monitor(config, output_dir=args.output)

    try:
        if args.once:
            logger.info("Running in --once mode")
            return asyncio.run(monitor.run_once())
        return asyncio.run(monitor.start())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        return 1


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()

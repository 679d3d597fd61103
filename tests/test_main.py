"""
Tests for the entry point and the forever loop.
"""

import asyncio
import json

import pytest
from unittest.mock import AsyncMock, patch

import main
from main import Monitor


class TestMonitorLoop:
    """Test suite for Monitor.start / run_once"""

    @pytest.mark.asyncio
    async def test_start_stops_after_cycle(self, monitor_config, tmp_path):
        monitor = Monitor(monitor_config, output_dir=str(tmp_path / "output"))
        monitor.service.run = AsyncMock(side_effect=lambda **kw: monitor.stop())

        exit_code = await monitor.start()

        assert exit_code == 0
        monitor.service.run.assert_awaited_once()
        assert (tmp_path / "output" / "example.com").is_dir()

    @pytest.mark.asyncio
    async def test_stop_interrupts_sleep(self, monitor_config, tmp_path):
        monitor_config = monitor_config.model_copy(update={"interval": 3600})
        monitor = Monitor(monitor_config, output_dir=str(tmp_path / "output"))
        calls = []

        async def _run(**kwargs):
            calls.append(kwargs)
            if len(calls) == 1:
                # Stop once the loop is asleep for the hour-long interval
                asyncio.get_running_loop().call_later(0.05, monitor.stop)

        monitor.service.run = _run

        assert await monitor.start() == 0
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_start_fails_on_output_error(self, monitor_config, tmp_path):
        blocker = tmp_path / "output"
        blocker.write_text("file")
        monitor = Monitor(monitor_config, output_dir=str(blocker))
        monitor.service.run = AsyncMock()

        assert await monitor.start() == 1
        monitor.service.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_run_once(self, monitor_config, tmp_path):
        monitor = Monitor(monitor_config, output_dir=str(tmp_path / "output"))
        monitor.service.run = AsyncMock(return_value=[])

        assert await monitor.run_once() == 0
        monitor.service.run.assert_awaited_once()


class TestMain:
    """Test suite for main()"""

    def test_missing_config_is_fatal(self, tmp_path):
        assert main.main(["--config", str(tmp_path / "missing.json")]) == 1

    def test_malformed_config_is_fatal(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[]")
        assert main.main(["--config", str(path)]) == 1

    def test_once_mode(self, tmp_path, monitor_config_data):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(monitor_config_data))

        with patch("main.MonitorService.run", new_callable=AsyncMock) as mock_run:
            exit_code = main.main(
                ["--once", "--config", str(path), "--output", str(tmp_path / "out")]
            )

        assert exit_code == 0
        mock_run.assert_awaited_once()
        assert (tmp_path / "out" / "example.com").is_dir()

import pytest
from typing import Any, Dict

from core import constants
from tests.mocks import make_response, script_body, site_config_body


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def target():
    from models.target import Target

    return Target(host="example.com", siteKey="abc")


@pytest.fixture
def monitor_config_data() -> Dict[str, Any]:
    return {
        "interval": 60,
        "notificationEndpoint": "https://discord.com/api/webhooks/1/token",
        "websites": [{"host": "example.com", "siteKey": "abc"}],
        "scripts": ["checksiteconfig.js"],
    }


@pytest.fixture
def monitor_config(monitor_config_data):
    from core.config import MonitorConfig

    return MonitorConfig.model_validate(monitor_config_data)


@pytest.fixture
def healthy_routes():
    """Routes for one target whose current bundle is /deadbeef/abcdefg."""
    return {
        constants.API_SCRIPT_URL: make_response(text=script_body("deadbeef")),
        constants.CHECKSITECONFIG_URL: make_response(text=site_config_body("/deadbeef/abcdefg")),
        f"{constants.ASSET_HOST}/deadbeef/abcdefg/checksiteconfig.js": make_response(
            body=b"var hsw = 1;"
        ),
    }

from pydantic_settings import BaseSettings
from typing import List, Optional
from pathlib import Path
from pydantic import BaseModel, Field, ValidationError, field_validator
import json
from core import constants
from core.exceptions import ConfigurationException, MissingConfigException
from models.target import Target


class Settings(BaseSettings):
    # --- Files ---
    CONFIG_PATH: str = Field(constants.DEFAULT_CONFIG_PATH, description="Monitor config file")
    OUTPUT_DIR: str = Field(constants.DEFAULT_OUTPUT_DIR, description="Archive output root")

    # --- HTTP ---
    USER_AGENT: str = Field(constants.DEFAULT_USER_AGENT)
    REQUEST_TIMEOUT: int = Field(constants.DEFAULT_REQUEST_TIMEOUT, description="Request timeout in seconds")

    # --- Logging ---
    LOG_LEVEL: str = Field(constants.DEFAULT_LOG_LEVEL, description="Logging level")
    LOG_FILE: str = Field(constants.DEFAULT_LOG_FILE, description="Log file path")
    LOG_FORMAT: str = Field(constants.DEFAULT_LOG_FORMAT, description="Log format (text/json)")
    LOG_MAX_BYTES: int = Field(constants.DEFAULT_LOG_MAX_BYTES, description="Max log file size")
    LOG_BACKUP_COUNT: int = Field(constants.DEFAULT_LOG_BACKUP_COUNT, description="Log backup count")
    LOG_TIMEZONE: str = Field(constants.DEFAULT_LOG_TIMEZONE, description="Timezone for log timestamps")

    # Webhook receiving WARNING+ log records (Optional)
    ERROR_WEBHOOK_URL: Optional[str] = None

    @field_validator("ERROR_WEBHOOK_URL", mode="before")
    @classmethod
    def parse_error_webhook_url(cls, v):
        if isinstance(v, str):
            v = v.strip().strip("'").strip('"')
            if not v:
                return None
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


class MonitorConfig(BaseModel):
    """Contents of config.json."""

    interval: int = Field(..., gt=0, description="Seconds between poll cycles")
    notification_endpoint: Optional[str] = Field(
        None, validation_alias="notificationEndpoint"
    )
    websites: List[Target]
    scripts: List[str]

    @field_validator("scripts")
    @classmethod
    def validate_scripts(cls, v):
        for name in v:
            if not name or "/" in name or "\\" in name or name in (".", ".."):
                raise ValueError(f"Invalid script name: {name!r}")
        return v

    def validate_all(self) -> List[str]:
        """
        Returns warnings for settings that are valid but probably unintended.
        """
        warnings = []
        if not self.websites:
            warnings.append("⚠️ No websites configured - nothing will be monitored")
        if not self.scripts:
            warnings.append("⚠️ No scripts configured - new versions will not be archived")
        if not self.notification_endpoint:
            warnings.append(
                "⚠️ notificationEndpoint is missing - notifications will be disabled"
            )
        elif not self.notification_endpoint.startswith(("https://", "http://")):
            warnings.append("⚠️ notificationEndpoint does not look like a URL")
        return warnings


def load_monitor_config(path: Optional[str] = None) -> MonitorConfig:
    """
    Loads and validates the monitor configuration file.

    Raises:
        MissingConfigException: if the file does not exist
        ConfigurationException: if the file is not valid JSON or fails validation
    """
    config_path = Path(path or settings.CONFIG_PATH)
    if not config_path.is_file():
        raise MissingConfigException(
            "Config file not found", {"path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationException(
            "Failed to parse config file", {"path": str(config_path), "error": str(e)}
        ) from e

    try:
        return MonitorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationException(
            "Invalid config structure",
            {"path": str(config_path), "errors": e.error_count()},
        ) from e


settings = Settings()

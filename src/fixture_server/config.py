"""Configuration settings for the fixture server and its browser harness."""

import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    # Server settings
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    external_host: str = "localhost"  # Hostname placed into URLs handed to the browser

    # Serving loop
    poll_interval_seconds: float = 0.05
    connection_timeout_seconds: float = 5.0  # Idle keep-alive connections are dropped after this
    shutdown_timeout_seconds: float = 5.0

    # Remote WebDriver (Appium or Selenium Grid)
    remote_url: str = "http://127.0.0.1:4723/wd/hub"
    browser: str = "safari"
    device_name: Optional[str] = "iPhone 6"
    platform_name: Optional[str] = "iOS"
    platform_version: Optional[str] = "8.1"

    # Timeouts
    default_wait_timeout_ms: int = 10000
    page_load_timeout_seconds: int = 30
    implicit_wait_seconds: int = 0

    # Logging
    log_level: str = "INFO"

    model_config = {"env_prefix": "FIXTURE_SERVER_"}

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def default_wait_timeout_seconds(self) -> float:
        """Convert ms timeout to seconds."""
        return self.default_wait_timeout_ms / 1000.0

    def mobile_capabilities(self) -> dict:
        """Capabilities describing the target device, omitting unset values."""
        caps = {
            "platformName": self.platform_name,
            "appium:deviceName": self.device_name,
            "appium:platformVersion": self.platform_version,
        }
        return {key: value for key, value in caps.items() if value}


# Global settings instance
settings = Settings()

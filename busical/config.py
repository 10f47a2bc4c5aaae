"""Configuration for BusiCal."""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from busical.constants import MAX_FEED_BYTES, STALE_AFTER_HOURS


class BusiCalConfig(BaseModel):
    """BusiCal configuration with Pydantic validation."""

    # Storage paths
    data_dir: Path = Field(default=Path("data"))
    log_dir: Path = Field(default=Path("logs"))

    # File naming
    storage_filename: str = Field(default="storage.json")
    log_filename: str = Field(default="busical.log")

    # Feed fetching
    proxy_url: str = Field(default="http://localhost:3000/proxy")
    fetch_timeout: float = Field(default=30.0, gt=0)
    max_feed_bytes: int = Field(default=MAX_FEED_BYTES, ge=1)

    # Display
    stale_after_hours: int = Field(default=STALE_AFTER_HOURS, ge=1)
    email_history_limit: int = Field(default=5, ge=1)

    # Device characteristics that a headless process cannot detect
    screen_width: int = Field(default=0, ge=0)
    screen_height: int = Field(default=0, ge=0)
    color_depth: int = Field(default=0, ge=0)

    @property
    def storage_path(self) -> Path:
        """Path of the JSON key-value storage file."""
        return self.data_dir / self.storage_filename

    @classmethod
    def from_env(cls) -> "BusiCalConfig":
        """Load configuration from environment variables and .env file."""
        load_dotenv(find_dotenv(usecwd=True))

        config_dict = {}

        # Storage paths
        if "BUSICAL_DATA_DIR" in os.environ:
            config_dict["data_dir"] = Path(os.environ["BUSICAL_DATA_DIR"])
        if "LOG_DIR" in os.environ:
            config_dict["log_dir"] = Path(os.environ["LOG_DIR"])

        # File naming
        if "BUSICAL_STORAGE_FILENAME" in os.environ:
            config_dict["storage_filename"] = os.environ["BUSICAL_STORAGE_FILENAME"]
        if "LOG_FILENAME" in os.environ:
            config_dict["log_filename"] = os.environ["LOG_FILENAME"]

        # Feed fetching
        if "BUSICAL_PROXY_URL" in os.environ:
            config_dict["proxy_url"] = os.environ["BUSICAL_PROXY_URL"]

        numeric_vars = {
            "BUSICAL_FETCH_TIMEOUT": ("fetch_timeout", float),
            "BUSICAL_MAX_FEED_BYTES": ("max_feed_bytes", int),
            "BUSICAL_STALE_AFTER_HOURS": ("stale_after_hours", int),
            "BUSICAL_EMAIL_HISTORY_LIMIT": ("email_history_limit", int),
            "BUSICAL_SCREEN_WIDTH": ("screen_width", int),
            "BUSICAL_SCREEN_HEIGHT": ("screen_height", int),
            "BUSICAL_COLOR_DEPTH": ("color_depth", int),
        }
        for env_key, (field_name, convert) in numeric_vars.items():
            if env_key in os.environ:
                try:
                    config_dict[field_name] = convert(os.environ[env_key])
                except ValueError:
                    pass  # Keep default if invalid

        return cls(**config_dict)

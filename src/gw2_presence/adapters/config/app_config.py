"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

# TOML section -> fields it may override
_TOML_SECTIONS: dict[str, tuple[str, ...]] = {
    "tracker": (
        "poll_interval_ms",
        "online_debounce_seconds",
        "location_transmission_threshold_seconds",
        "distance_transmission_threshold",
        "lookup_timeout_seconds",
        "shutdown_timeout_seconds",
        "max_message_length",
        "mumble_link_name",
    ),
    "api": (
        "gw2_api_base_url",
        "gw2_api_language",
        "gw2_api_timeout_seconds",
        "gw2_api_min_delay_seconds",
    ),
    "logging": ("log_level",),
}


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Tracker configuration
    poll_interval_ms: int = Field(default=50, description="Interval between feed polls")
    online_debounce_seconds: float = Field(
        default=5.0,
        description="How long the game must stay online/offline before peers are told",
    )
    location_transmission_threshold_seconds: float = Field(
        default=5.0, description="Minimum time between two presence transmissions"
    )
    distance_transmission_threshold: float = Field(
        default=20.0,
        description="Minimum move in continent units before a position is re-transmitted",
    )
    lookup_timeout_seconds: float = Field(
        default=5.0, description="Upper bound for map, world and waypoint lookups"
    )
    shutdown_timeout_seconds: float = Field(
        default=1.0, description="How long to wait for the tracker to exit on stop"
    )
    max_message_length: int = Field(
        default=1024, description="Largest command in bytes the peer transport accepts"
    )
    mumble_link_name: str = Field(
        default="MumbleLink", description="Name of the MumbleLink shared memory block"
    )

    # GW2 API configuration
    gw2_api_base_url: str = Field(
        default="https://api.guildwars2.com", description="Base URL of the Guild Wars 2 API"
    )
    gw2_api_language: str = Field(default="en", description="Language of names from the API")
    gw2_api_timeout_seconds: int = Field(default=10, description="Timeout for API requests")
    gw2_api_min_delay_seconds: float = Field(
        default=0.1, description="Minimum delay between API requests"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # TOML config file path, optional
    config_file: str | None = Field(
        default=None, description="Path to TOML configuration file overriding the defaults"
    )

    @field_validator(
        "poll_interval_ms",
        "lookup_timeout_seconds",
        "shutdown_timeout_seconds",
        "max_message_length",
        "gw2_api_timeout_seconds",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate intervals, timeouts and limits are positive."""
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator(
        "online_debounce_seconds",
        "location_transmission_threshold_seconds",
        "distance_transmission_threshold",
        "gw2_api_min_delay_seconds",
    )
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        """Validate thresholds are not negative."""
        if v < 0:
            raise ValueError("threshold must not be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        if v.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return v.upper()

    @model_validator(mode="after")
    def apply_toml_overrides(self) -> "AppConfig":
        """Override fields from the TOML config file if one is set."""
        if self.config_file:
            toml_data = self._load_toml_data()
            for section, fields in _TOML_SECTIONS.items():
                values = toml_data.get(section, {})
                if not isinstance(values, dict):
                    raise ValueError(f"TOML config '{section}' must be a table")
                for name in fields:
                    if name in values:
                        setattr(self, name, values[name])
            # Overrides bypass field validators, so re-run them
            validated = type(self).model_validate(self.model_dump(exclude={"config_file"}))
            for name in type(self).model_fields:
                if name != "config_file":
                    setattr(self, name, getattr(validated, name))
        return self

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML file."""
        assert self.config_file is not None
        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            return tomllib.load(f)

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000

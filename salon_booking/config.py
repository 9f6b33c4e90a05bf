"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional, Tuple

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class ProviderConfig(BaseModel):
    """Where the availability provider and persistence service live."""
    base_url: str = "http://127.0.0.1:8000"
    availability_path: str = "get-free-time"
    booking_path: str = "book-appointment"
    timeout_seconds: float = 10.0

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {value!r}")
        return value.rstrip("/")

    @field_validator("availability_path", "booking_path")
    @classmethod
    def validate_path(cls, value: str) -> str:
        cleaned = value.strip().strip("/")
        if not cleaned:
            raise ValueError("Endpoint paths must not be empty")
        return cleaned

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    def availability_url(self) -> str:
        return f"{self.base_url}/{self.availability_path}"

    def booking_url(self) -> str:
        return f"{self.base_url}/{self.booking_path}"


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    booking_window_days: int = 7
    log_level: str = "WARNING"
    provider: ProviderConfig = Field(default_factory=ProviderConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @field_validator("booking_window_days")
    @classmethod
    def validate_window(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("booking_window_days must be greater than zero")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log_level: {value!r}")
        return level

    @model_validator(mode="after")
    def validate_distinct_endpoints(self) -> "AppConfig":
        """Availability and booking must not share an endpoint."""
        if self.provider.availability_path == self.provider.booking_path:
            raise ValueError("availability_path and booking_path must differ")
        return self

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """
        Build the configuration from a YAML file.

        An explicit path must exist. Without one, the first config.yaml found
        by config_search_paths() is used, and built-in defaults when there is none.

        Raises:
            FileNotFoundError: If an explicit config_path does not exist
            ValueError: If the file is not a YAML mapping or holds invalid settings
        """
        if config_path is None:
            config_path = next((path for path in config_search_paths() if path.is_file()), None)
            if config_path is None:
                return cls()
        elif not config_path.is_file():
            raise FileNotFoundError(
                f"No config at {config_path}; copy config.example.yaml to get started."
            )

        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ValueError(f"{config_path} is not valid YAML: {exc}") from exc

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"{config_path} must hold a mapping of settings, got {type(data).__name__}")
        return cls(**data)


def config_search_paths() -> Tuple[Path, ...]:
    """config.yaml in the working directory, then next to the package."""
    return (
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parent.parent / "config.yaml",
    )

"""
Runtime configuration for SalaryBench.

Values come from SALARYBENCH_* environment variables or a .env file in the
working directory, falling back to the defaults below.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

ENV_PREFIX = "SALARYBENCH_"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Tunable constants for matching, statistics and rendering."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    db_path: Path = Path("data/salarybench.db")
    log_level: LogLevel = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = True

    # Tier resolution
    min_sample_size: int = Field(default=5, ge=1)
    limited_data_ceiling: int = Field(default=10, ge=1)

    # Weighted estimate ("median gravity")
    small_sample_ceiling: int = Field(default=15, ge=1)
    gravity_small_sample: float = Field(default=0.7, ge=0, le=1)
    gravity_large_sample: float = Field(default=0.3, ge=0, le=1)
    recommendation_half_width: float = Field(default=0.15, ge=0, le=1)

    # Narrative position bands. Two thresholds pairs were in use
    # (0.25/0.75 and 0.33/0.67); one pair is applied everywhere.
    position_band_low: float = Field(default=0.33, ge=0, le=1)
    position_band_high: float = Field(default=0.67, ge=0, le=1)

    # Upper bound used for positioning inside the open 10+ bucket
    open_bucket_ceiling: int = Field(default=100, ge=1)

    # Display
    rounding_granularity: int = Field(default=1000, ge=1)
    currency_suffix: str = "kr."
    thousands_separator: str = "."

    # Feed counted for the open-postings side statistic
    postings_source: str = "thehub.io"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _check_bands(self):
        if not self.position_band_low < self.position_band_high:
            raise ValueError(
                "position bands must satisfy low < high, got "
                f"{self.position_band_low} / {self.position_band_high}"
            )
        return self


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"])
        name = f"{ENV_PREFIX}{field.upper()}" if field else "settings"
        parts.append(f"{name}: {item['msg']}")
    return "; ".join(parts)


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Returns:
        Settings instance

    Raises:
        ConfigError: If a variable cannot be parsed or thresholds are inconsistent
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {_describe(e)}") from e


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the process-wide Settings instance."""
    global _settings

    if _settings is None:
        _settings = load_settings()

    return _settings


def reset_settings():
    """Reset cached settings (useful for testing)."""
    global _settings
    _settings = None

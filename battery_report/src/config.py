"""
Battery report daemon configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Every variable is optional and prefixed with ``BATTERY_REPORT_``; values may
also come from a ``.env`` file in the working directory.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-001)

TODO:
- None
"""

import logging
import tempfile
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


def _default_report_path() -> str:
    return str(Path(tempfile.gettempdir()) / "battery_report.html")


class ReportSettings(BaseSettings):
    """Battery report daemon configuration.

    Attributes:
        sample_interval_s: Seconds between periodic battery samples.
        base_backoff_s: First retry delay after a failed periodic read.
            Later retries double this, capped at sample_interval_s.
        report_path: Fixed path the HTML report is written to.
        template_path: Optional HTML template overriding the bundled one.
        chart_asset_path: Optional chart script overriding the bundled one.
        decimal_places: Precision used for charge labels and the title.
        time_format: strftime format for x-axis tick labels.
        open_report: Hand the report to the OS viewer after rendering.
        log_level: Root log level name.
    """

    sample_interval_s: int = 300
    base_backoff_s: float = 5.0
    report_path: str = Field(default_factory=_default_report_path)
    template_path: str | None = None
    chart_asset_path: str | None = None
    decimal_places: int = 1
    time_format: str = "%Y-%m-%d %H:%M"
    open_report: bool = True
    log_level: str = "INFO"

    @field_validator("sample_interval_s")
    @classmethod
    def sample_interval_must_be_positive(cls, v: int) -> int:
        """Validate the sampling interval is at least one second."""
        if v < 1:
            raise ValueError("BATTERY_REPORT_SAMPLE_INTERVAL_S must be >= 1")
        return v

    @field_validator("base_backoff_s")
    @classmethod
    def base_backoff_must_be_positive(cls, v: float) -> float:
        """Validate the retry backoff is positive."""
        if v <= 0:
            raise ValueError("BATTERY_REPORT_BASE_BACKOFF_S must be > 0")
        return v

    @field_validator("decimal_places")
    @classmethod
    def decimal_places_must_be_valid(cls, v: int) -> int:
        """Validate label precision is between 0 and 6."""
        if v < 0 or v > 6:
            raise ValueError("BATTERY_REPORT_DECIMAL_PLACES must be between 0 and 6")
        return v

    @field_validator("time_format")
    @classmethod
    def time_format_must_have_directive(cls, v: str) -> str:
        """Reject formats that would render every tick identically."""
        if "%" not in v:
            raise ValueError("BATTERY_REPORT_TIME_FORMAT must contain a strftime directive")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Validate and normalize the log level name."""
        name = v.upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"BATTERY_REPORT_LOG_LEVEL is not a log level: {v!r}")
        return name

    model_config = {
        "env_prefix": "BATTERY_REPORT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

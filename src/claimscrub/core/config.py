"""
Application configuration using pydantic-settings.
Loads from environment variables and .env file.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from claimscrub.core.constants import (
    DEFAULT_CHARGE_TOLERANCE,
    DEFAULT_MAX_DIAGNOSIS_CODES,
    DEFAULT_TIMELY_FILING_DAYS,
    GROUP_NUMBER_REQUIRED_PAYERS,
)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    claimscrub_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Paths
    reports_path: Path = Path("./data/reports")
    audit_dir: Path | None = None

    # Rule thresholds
    timely_filing_days: int = Field(default=DEFAULT_TIMELY_FILING_DAYS, ge=1)
    max_diagnosis_codes: int = Field(default=DEFAULT_MAX_DIAGNOSIS_CODES, ge=1)
    charge_tolerance: float = Field(default=DEFAULT_CHARGE_TOLERANCE, ge=0.0)
    group_required_payers: list[str] = Field(
        default_factory=lambda: list(GROUP_NUMBER_REQUIRED_PAYERS)
    )

    # Engine
    surface_rule_errors: bool = False

    # Reports
    report_max_violations_shown: int = Field(default=50, ge=1)
    report_top_issues_limit: int = Field(default=5, ge=1)

    @property
    def is_production(self) -> bool:
        return self.claimscrub_env == "production"

    @property
    def is_development(self) -> bool:
        return self.claimscrub_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

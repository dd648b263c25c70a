"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation. Only the service
layer reads these; the OPEX and metrics calculators take every input as an
argument.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Dashboard defaults loaded from ``ONEPAGER_*`` environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Rent roll
    expiring_window_days: int = Field(default=60, ge=1, le=365, description="Lease end window flagged as expiring")
    renewal_bump_pct: float = Field(default=5.0, ge=0, le=100, description="Suggested rent increase on renewal %")
    renewal_suggestion_limit: int = Field(default=3, ge=1, description="Renewals shown on the dashboard")

    # Property defaults (as pre-filled by the properties table)
    tax_estimate_rate_pct: float = Field(default=1.3, ge=0, description="Property tax estimate as % of sale price")
    default_vacancy_pct: float = Field(default=5.0, ge=0, le=100)

    # Metrics presentation
    healthy_dcr: float = Field(default=1.25, ge=0, description="DCR at or above which coverage is healthy")

    # Projections
    projection_years: int = Field(default=10, ge=1, le=50)
    noi_growth_pct: float = Field(default=3.0, description="NOI growth % used by the wealth-build chart")

    # Export
    export_dir: str = Field(default="results", description="Directory for dashboard snapshots")

    model_config = {
        "env_prefix": "ONEPAGER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()

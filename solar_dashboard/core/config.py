"""
Dashboard API configuration loaded from environment variables.

Uses Pydantic BaseSettings for env var loading and validation. A settings
instance is built once at startup and passed explicitly into the application
factory; nothing reads the environment at import time.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class DashboardSettings(BaseSettings):
    """Configuration for the dashboard API.

    Attributes:
        data_mode: ``database`` reads telemetry from DATABASE_URL, ``mock``
            synthesizes deterministic readings (no database needed).
        database_url: Async SQLAlchemy URL. Required in database mode.
        redis_url: Redis URL for the latest-reading cache. Caching is
            disabled when unset.
        cache_ttl_s: Seconds a cached latest reading stays valid.
        request_timeout_s: Upper bound for one dashboard computation.
        decimal_places: Rounding applied to percent changes.
        co2_kg_per_kwh: Grid emission factor used for the CO2-avoided KPI.
        rated_capacity_kw: Nameplate capacity of each generation source,
            used for efficiency.
        mock_seed: Seed for the synthetic telemetry generator.
        mock_sample_interval_s: Spacing of synthetic samples.
        mock_max_samples: Cap on synthetic samples per source and window;
            the spacing widens for long windows.
        cors_origins: Origins allowed to call the API from a browser.
        log_level: Root log level.
    """

    data_mode: Literal["database", "mock"] = "database"
    database_url: str = ""
    redis_url: str = ""
    cache_ttl_s: int = 5
    request_timeout_s: float = 10.0
    decimal_places: int = 1
    co2_kg_per_kwh: float = 0.436
    rated_capacity_kw: float = 100.0
    mock_seed: int = 42
    mock_sample_interval_s: int = 900
    mock_max_samples: int = 2000
    cors_origins: list[str] = ["http://localhost:5173"]
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _database_url_required(self) -> "DashboardSettings":
        """Require DATABASE_URL unless running on synthetic data."""
        if self.data_mode == "database" and not self.database_url:
            raise ValueError("DATABASE_URL is required when DATA_MODE=database")
        return self

    @field_validator("cache_ttl_s", "mock_sample_interval_s", "mock_max_samples")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        """Validate counters and intervals are at least 1."""
        if v < 1:
            raise ValueError("value must be >= 1")
        return v

    @field_validator("request_timeout_s", "rated_capacity_kw")
    @classmethod
    def must_be_positive_float(cls, v: float) -> float:
        """Validate timeouts and capacities are strictly positive."""
        if v <= 0:
            raise ValueError("value must be > 0")
        return v

    @field_validator("decimal_places")
    @classmethod
    def decimal_places_in_range(cls, v: int) -> int:
        """Validate rounding precision is between 0 and 6."""
        if v < 0 or v > 6:
            raise ValueError("DECIMAL_PLACES must be between 0 and 6")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_known(cls, v: str) -> str:
        """Normalise and validate the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL '{v}'")
        return level

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

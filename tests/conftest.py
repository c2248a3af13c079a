"""
Shared test fixtures for the dashboard API tests.

Provides settings for mock data mode, a fixed clock, reading factories, and a
TestClient over an application built from those settings. Database and Redis
are never contacted; tests of the database reader use AsyncMock sessions.

CHANGELOG:
- 2026-10-19: Initial creation with mock-mode app fixture and reading factory
"""

import sys
from collections.abc import Callable, Generator
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

# Ensure the repository root is on sys.path so ``solar_dashboard`` resolves
# when pytest is invoked without an editable install.
_REPO_ROOT = str(Path(__file__).resolve().parent.parent)
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from solar_dashboard.api.main import create_app  # noqa: E402
from solar_dashboard.core.config import DashboardSettings  # noqa: E402
from solar_dashboard.core.sources import PowerSource  # noqa: E402
from solar_dashboard.models import READING_FIELDS, PowerReading  # noqa: E402

FIXED_NOW = datetime(2026, 6, 15, 12, 30, tzinfo=UTC)


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def mock_settings() -> DashboardSettings:
    """Settings for synthetic telemetry; no database URL needed."""
    return DashboardSettings(
        _env_file=None,
        data_mode="mock",
        mock_seed=7,
        request_timeout_s=5.0,
    )


@pytest.fixture()
def client(mock_settings: DashboardSettings) -> Generator[TestClient, None, None]:
    """Create a FastAPI TestClient over a mock-mode application.

    Uses a context manager so the application lifespan events run.

    Yields:
        TestClient: Configured test client for the dashboard app.
    """
    app = create_app(mock_settings, clock=lambda: FIXED_NOW)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def mock_db_session() -> AsyncMock:
    """Create a mock async database session.

    Returns:
        AsyncMock: A mock that behaves like an SQLAlchemy AsyncSession.
    """
    session = AsyncMock()
    session.execute = AsyncMock(return_value=MagicMock())
    session.close = AsyncMock()
    return session


@pytest.fixture()
def mock_redis() -> AsyncMock:
    """Create a mock async Redis client.

    Returns:
        AsyncMock: A mock that behaves like a redis.asyncio.Redis client.
    """
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock()
    client.aclose = AsyncMock()
    return client


def make_reading(
    source: PowerSource = PowerSource.GRID1,
    time: datetime = FIXED_NOW,
    **overrides: float,
) -> PowerReading:
    """Build a PowerReading with every numeric field 0 unless overridden."""
    values = dict.fromkeys(READING_FIELDS, 0.0)
    values.update(overrides)
    return PowerReading(source=source, time=time, **values)


@pytest.fixture()
def reading_factory() -> Callable[..., PowerReading]:
    return make_reading

"""
Shared fixtures for the platform test suite.
"""

from datetime import date

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from wx_config import ScoringConfig, get_brand, load_brand_catalog, load_platform_config  # noqa: E402
from wx_scoring import ScoringService, reset_default_service  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_process_state():
    """Drop cached config and the process-wide scoring service between tests."""
    load_platform_config.cache_clear()
    load_brand_catalog.cache_clear()
    reset_default_service()
    yield
    reset_default_service()


@pytest.fixture
def service():
    return ScoringService(ScoringConfig())


@pytest.fixture
def canopy():
    return get_brand("canopy")


@pytest.fixture
def winter_day():
    # a Wednesday in January
    return date(2024, 1, 10)


@pytest.fixture
def cold_dry_weather():
    return {"temperature": 38.0, "humidity": 30.0, "precipitation": 0.0}

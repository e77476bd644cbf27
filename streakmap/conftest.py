# streakmap/conftest.py
import sys
from datetime import date
from pathlib import Path

import pytest

# Add project root to PYTHONPATH
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def client():
    """TestClient bound to the full application (middleware and error handlers included)."""
    from fastapi.testclient import TestClient

    from streakmap.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def default_settings(monkeypatch):
    """
    Pin streak defaults so tests do not depend on the developer's .env.

    Returns the patched settings object.
    """
    from streakmap.core.config import settings

    monkeypatch.setattr(settings, "STREAK_TIMEZONE", "UTC")
    monkeypatch.setattr(settings, "STREAK_WEEK_START", "monday")
    monkeypatch.setattr(settings, "STREAK_MIN_COUNT", 1)
    monkeypatch.setattr(settings, "STREAK_CURRENT_POLICY", "latest")
    monkeypatch.setattr(settings, "HEATMAP_LEVELS", 4)
    monkeypatch.setattr(settings, "MAX_INPUT_DATES", 10000)
    monkeypatch.setattr(settings, "MAX_SPAN_DAYS", 3660)
    return settings


@pytest.fixture
def day():
    """Anchor date used across streak tests: a Monday."""
    return date(2024, 1, 1)

# tests/conftest.py
import os
import sys
from pathlib import Path

import pytest

# Environment must be set before the application modules are imported
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""
os.environ["APP_TIMEZONE"] = "America/Los_Angeles"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["ENFORCE_CONFIRMATION_WINDOW"] = "false"
os.environ["PENALTY_STACKING"] = "additive"

ROOT = Path(__file__).resolve().parents[1]  # backend/
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from streakkeeper.services.habits.repository import InMemoryHabitRepository  # noqa: E402
from streakkeeper.services.habits.service import HabitService  # noqa: E402
from streakkeeper.utils.locks import KeyedLocks  # noqa: E402
from tests.helpers import FakeClock, local_dt  # noqa: E402


@pytest.fixture()
def clock():
    """Clock frozen at noon on 2024-01-01 local time"""
    return FakeClock(local_dt(2024, 1, 1, 12))


@pytest.fixture()
def repository():
    return InMemoryHabitRepository()


@pytest.fixture()
def service(repository, clock):
    return HabitService(repository, locks=KeyedLocks(), clock=clock)


@pytest.fixture()
def client(service):
    """FastAPI test client wired to the test service"""
    from fastapi.testclient import TestClient

    from main import app
    from streakkeeper.core.dependencies import get_habit_service

    app.dependency_overrides[get_habit_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()

from datetime import datetime, timezone

import pytest

from jiten_srs.fsrs import database
from jiten_srs.fsrs.constants import DEFAULT_PARAMETERS
from jiten_srs.fsrs.scheduler import Scheduler


FSRS_ENV_VARS = (
    "FSRS_DESIRED_RETENTION",
    "FSRS_LEARNING_STEPS",
    "FSRS_RELEARNING_STEPS",
    "FSRS_MAXIMUM_INTERVAL",
    "FSRS_ENABLE_FUZZING",
    "FSRS_PARAMETERS",
)


@pytest.fixture
def parameters():
    return DEFAULT_PARAMETERS


@pytest.fixture
def scheduler():
    """Deterministic scheduler (no fuzzing) with default settings."""
    return Scheduler(enable_fuzzing=False)


@pytest.fixture
def review_time():
    return datetime(2022, 11, 29, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def clean_env(monkeypatch):
    """Removes FSRS_* settings so config defaults apply."""
    for name in FSRS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Points the card store at a fresh SQLite database."""
    url = f"sqlite:///{tmp_path / 'fsrs.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.delenv("TEST_MODE", raising=False)

    database.init_db()
    yield url
    database.get_engine().dispose()

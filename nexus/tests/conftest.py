"""
Shared fixtures: an in-memory database per test, a pinned calendar and an
API client wired to both.
"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="nexus-tests-")
os.environ.setdefault("NEXUS_DATABASE_URL", "sqlite:///" + os.path.join(_TMP_DIR, "nexus.db"))
os.environ.setdefault("NEXUS_LOG_DIR", os.path.join(_TMP_DIR, "logs"))
os.environ.setdefault("NEXUS_BACKUP_DIR", os.path.join(_TMP_DIR, "backups"))

import pytest
from datetime import date, datetime, timedelta, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from nexus.database import Base
from nexus.models import Habit, HabitCompletion
from nexus.repositories.settings_repository import SettingsRepository
from nexus.shared.date_utils import to_date
from nexus.constants import Frequency


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def default_settings(db_session):
    return SettingsRepository.get(db_session)


@pytest.fixture
def today():
    """Monday"""
    return date(2024, 1, 15)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def habit_factory(db_session):
    """Persist a habit created at 08:00 UTC on the given day"""
    def make(
        title="Read",
        created=date(2024, 1, 1),
        frequency=Frequency.DAILY,
        target=1,
        completions=(),
        archived=False,
        notes=None,
    ):
        habit = Habit(
            title=title,
            frequency=Frequency(frequency).value,
            target=target,
            archived=archived,
            created_at=datetime(created.year, created.month, created.day, 8, 0, tzinfo=timezone.utc),
        )
        habit.notes = notes or {}
        habit.completion_records = [HabitCompletion(date=to_date(day)) for day in completions]
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return make


@pytest.fixture
def client(db_session, today):
    from fastapi.testclient import TestClient
    from nexus.main import app
    from nexus.constants import API_KEY
    from nexus.database import get_db
    from nexus.dependencies import get_today

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: today

    # Not entered as a context manager, so the scheduler never starts
    yield TestClient(app, headers={"X-API-Key": API_KEY})

    app.dependency_overrides.clear()


@pytest.fixture
def backup_dir(tmp_path, monkeypatch):
    from nexus.services import backup_service

    path = tmp_path / "backups"
    monkeypatch.setattr(backup_service, "BACKUP_DIR", str(path))
    return path

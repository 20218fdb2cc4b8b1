"""Shared fixtures: entity factories and a throwaway SQLite database."""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskmaster import config, db
from taskmaster.main import app
from taskmaster.models import Bill, Task


@pytest.fixture
def now():
    return datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_task(now):
    """Factory for tasks with sensible defaults."""
    counter = iter(range(1, 1000))

    def _make(title: str, **kwargs) -> Task:
        kwargs.setdefault("id", f"t{next(counter)}")
        kwargs.setdefault("created_at", now)
        return Task(title=title, **kwargs)

    return _make


@pytest.fixture
def make_bill(now):
    """Factory for bills; due date defaults to ``now``."""
    counter = iter(range(1, 1000))

    def _make(title: str, amount: float = 100.0, **kwargs) -> Bill:
        kwargs.setdefault("id", f"b{next(counter)}")
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("due_date", now)
        return Bill(title=title, amount=amount, **kwargs)

    return _make


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "taskmaster.sqlite3"
    monkeypatch.setattr(config, "DB_PATH", str(path))
    db.init_db()
    return path


@pytest.fixture
def api(db_path):
    with TestClient(app) as client:
        yield client

# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from task_buddy.core.state import AppState
from task_buddy.stats.stats_store import StatisticsStore
from task_buddy.storage.kv_store import KeyValueStore
from task_buddy.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="buddy-test",
        log_level="DEBUG",
        log_to_file=False,
        console_enabled=False,
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "buddy.sqlite3",
        stats_key="your_buddy_stats",
        tasks_key="your_buddy_tasks",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 9, 0))


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock) -> AppState:
    """
    AppState wired with a fake clock.

    NOTE: We keep the real SQLite backend here because its correctness
    is part of what we want to test.
    """
    backend = KeyValueStore(settings.db_path)
    return AppState(
        settings=settings,
        clock=clock,
        task_store=TaskStore(backend, key=settings.tasks_key),
        stats=StatisticsStore(backend, clock, key=settings.stats_key),
    )

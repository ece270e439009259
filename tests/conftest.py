# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from nextup.core.state import AppState
from nextup.tasks.task_store import TaskStore

from .fakes import FakeRandom


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="nextup-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        rng_seed=None,
        list_limit=50,
    )


@pytest.fixture()
def rng() -> FakeRandom:
    return FakeRandom()


@pytest.fixture()
def state(settings: SimpleNamespace, rng: FakeRandom) -> AppState:
    """
    AppState wired with a deterministic random source.

    NOTE: We keep the real SQLite TaskStore here because its correctness
    is part of what we want to test.
    """
    return AppState(
        settings=settings,
        task_store=TaskStore(settings.tasks_db_path),
        rng=rng,
    )

# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from nextup.config import Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "NEXTUP_APP_NAME",
        "NEXTUP_LOG_LEVEL",
        "NEXTUP_DATA_DIR",
        "NEXTUP_TASKS_DB_PATH",
        "NEXTUP_RNG_SEED",
        "NEXTUP_LIST_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env) -> None:
    s = Settings.from_env()
    assert s.app_name == "nextup"
    assert s.log_level == "INFO"
    assert s.data_dir == Path(".local/nextup")
    assert s.tasks_db_path == Path(".local/nextup") / "tasks.sqlite3"
    assert s.rng_seed is None
    assert s.list_limit == 50


def test_env_overrides(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("NEXTUP_DATA_DIR", str(tmp_path))
    clean_env.setenv("NEXTUP_RNG_SEED", "42")
    clean_env.setenv("NEXTUP_LIST_LIMIT", "10")

    s = Settings.from_env()
    assert s.data_dir == tmp_path
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.rng_seed == 42
    assert s.list_limit == 10


def test_malformed_numbers_fall_back(clean_env) -> None:
    clean_env.setenv("NEXTUP_RNG_SEED", "not-a-number")
    clean_env.setenv("NEXTUP_LIST_LIMIT", "lots")

    s = Settings.from_env()
    assert s.rng_seed is None
    assert s.list_limit == 50

# src/nextup/tasks/task_api.py

from __future__ import annotations

import logging
import time

from ..core.state import AppState
from ..ranking.dominance import RankedTask, rank_report, select_most_urgent
from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


def _now(now_ts: float | None) -> float:
    return time.time() if now_ts is None else float(now_ts)


def _open_tasks(state: AppState) -> list[Task]:
    return list(state.task_store.list_open_tasks())


def pick_next_task(state: AppState, *, now_ts: float | None = None) -> Task | None:
    """
    Ask the ranking engine which open task to surface next.

    Returns None when there are no open tasks.
    """
    now = _now(now_ts)
    tasks = _open_tasks(state)
    by_id = {t.id: t for t in tasks}

    winner = select_most_urgent([t.to_snapshot() for t in tasks], state.rng, now=now)
    if winner is None:
        logger.debug("pick_next_task: no open tasks")
        return None

    task = by_id[winner.id]
    logger.info("Next task id=%s (out of %d open)", task.id, len(tasks))
    return task


def explain_ranking(
    state: AppState, *, now_ts: float | None = None
) -> list[tuple[Task, RankedTask]]:
    """Every open task with its metrics and dominance count, most dominant first."""
    now = _now(now_ts)
    tasks = _open_tasks(state)
    report = rank_report([t.to_snapshot() for t in tasks], now=now)
    rows = list(zip(tasks, report))
    rows.sort(key=lambda row: (-row[1].dominance_count, row[0].created_at, row[0].id))
    return rows


def defer(state: AppState, task_id: int, *, now_ts: float | None = None) -> bool:
    ok = state.task_store.defer_task(task_id, now_ts=_now(now_ts))
    if ok:
        logger.info("Deferred task id=%s", task_id)
    else:
        logger.info("Defer ignored: task id=%s is missing or not open", task_id)
    return ok


def complete(state: AppState, task_id: int, *, now_ts: float | None = None) -> bool:
    ok = state.task_store.update_task_status(task_id, TaskStatus.DONE, now_ts=_now(now_ts))
    if ok:
        logger.info("Completed task id=%s", task_id)
    return ok


def cancel(state: AppState, task_id: int, *, now_ts: float | None = None) -> bool:
    ok = state.task_store.update_task_status(task_id, TaskStatus.CANCELLED, now_ts=_now(now_ts))
    if ok:
        logger.info("Cancelled task id=%s", task_id)
    return ok

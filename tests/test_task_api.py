# tests/test_task_api.py

from __future__ import annotations

from nextup.tasks import task_api
from nextup.tasks.task_models import TaskStatus


def test_pick_next_task_with_no_open_tasks(state, rng) -> None:
    assert task_api.pick_next_task(state, now_ts=1000.0) is None
    assert rng.calls == []


def test_overdue_task_is_picked_over_plain_one(state) -> None:
    store = state.task_store
    store.add_task(description="plain", now_ts=1000.0)
    late = store.add_task(description="late", deadline_at=1500.0, now_ts=1000.0)

    task = task_api.pick_next_task(state, now_ts=2000.0)
    assert task is not None
    assert task.id == late
    assert task.description == "late"


def test_deferring_turns_dominance_into_a_tie(state, rng) -> None:
    store = state.task_store
    older = store.add_task(description="older", now_ts=1000.0)
    newer = store.add_task(description="newer", now_ts=1100.0)

    rows = task_api.explain_ranking(state, now_ts=5000.0)
    assert [(t.id, r.dominance_count) for t, r in rows] == [(older, 1), (newer, 0)]
    assert task_api.pick_next_task(state, now_ts=5000.0).id == older
    assert rng.calls == [1]

    assert task_api.defer(state, older, now_ts=3000.0)

    rows = task_api.explain_ranking(state, now_ts=5000.0)
    assert [r.dominance_count for _, r in rows] == [0, 0]

    rng.pick = 1
    # Open tasks come back oldest first, so index 1 is the newer task.
    assert task_api.pick_next_task(state, now_ts=5000.0).id == newer
    assert rng.calls[-1] == 2


def test_completed_and_cancelled_tasks_are_not_ranked(state) -> None:
    store = state.task_store
    a = store.add_task(description="a", now_ts=1.0)
    b = store.add_task(description="b", now_ts=2.0)
    c = store.add_task(description="c", now_ts=3.0)

    assert task_api.complete(state, a, now_ts=10.0)
    assert task_api.cancel(state, b, now_ts=10.0)
    assert task_api.pick_next_task(state, now_ts=10.0).id == c

    assert store.get_task(a).status == TaskStatus.DONE
    assert store.get_task(b).status == TaskStatus.CANCELLED


def test_lifecycle_helpers_reject_missing_or_closed_tasks(state) -> None:
    tid = state.task_store.add_task(description="x", now_ts=1.0)
    assert task_api.complete(state, tid, now_ts=2.0)

    assert task_api.complete(state, tid, now_ts=3.0) is False
    assert task_api.cancel(state, tid, now_ts=3.0) is False
    assert task_api.defer(state, tid, now_ts=3.0) is False
    assert task_api.complete(state, 4242) is False


def test_complete_after_cancel_keeps_the_task_cancelled(state) -> None:
    tid = state.task_store.add_task(description="x", now_ts=1.0)
    assert task_api.cancel(state, tid, now_ts=2.0)

    assert task_api.complete(state, tid, now_ts=3.0) is False
    task = state.task_store.get_task(tid)
    assert task.status == TaskStatus.CANCELLED
    assert task.completed_at is None

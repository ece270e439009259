# tests/test_metrics.py

from __future__ import annotations

import math
import random

from nextup.ranking import (
    NO_PRESSURE,
    TaskSnapshot,
    derive_metrics,
    dominates,
    rank_report,
    select_most_urgent,
)

NOW = 1_000_000.0


def test_plain_task_maps_to_sentinels() -> None:
    m = derive_metrics(TaskSnapshot(id=1, created_at=500.0), now=NOW)
    assert m.age == 500.0
    assert m.stagnation == 500.0
    assert m.time_to_deadline == NO_PRESSURE
    assert m.overdue == 0.0


def test_deferred_task_uses_deferred_at_for_stagnation() -> None:
    m = derive_metrics(TaskSnapshot(id=1, created_at=500.0, deferred_at=900.0), now=NOW)
    assert m.age == 500.0
    assert m.stagnation == 900.0


def test_future_deadline_gives_remaining_time() -> None:
    m = derive_metrics(TaskSnapshot(id=1, created_at=0.0, deadline_at=NOW + 60), now=NOW)
    assert m.time_to_deadline == 60.0
    assert m.overdue == 0.0


def test_past_deadline_gives_negative_overdue() -> None:
    m = derive_metrics(TaskSnapshot(id=1, created_at=0.0, deadline_at=NOW - 120), now=NOW)
    assert m.time_to_deadline == NO_PRESSURE
    assert m.overdue == -120.0


def test_deadline_exactly_now_is_neutral() -> None:
    m = derive_metrics(TaskSnapshot(id=1, created_at=0.0, deadline_at=NOW), now=NOW)
    assert m.time_to_deadline == NO_PRESSURE
    assert m.overdue == 0.0


def test_more_overdue_is_more_urgent() -> None:
    a = derive_metrics(TaskSnapshot(id="a", created_at=0.0, deadline_at=NOW - 1000), now=NOW)
    b = derive_metrics(TaskSnapshot(id="b", created_at=0.0, deadline_at=NOW - 10), now=NOW)
    assert a.overdue < b.overdue
    assert dominates(a, b)


def test_all_components_are_finite() -> None:
    snapshots = [
        TaskSnapshot(id=1, created_at=1.0),
        TaskSnapshot(id=2, created_at=1.0, deferred_at=2.0),
        TaskSnapshot(id=3, created_at=1.0, deadline_at=NOW + 5),
        TaskSnapshot(id=4, created_at=1.0, deadline_at=NOW - 5),
    ]
    for s in snapshots:
        assert all(math.isfinite(x) for x in derive_metrics(s, now=NOW))


def test_overdue_task_beats_plain_task_created_at_same_time() -> None:
    plain = TaskSnapshot(id="plain", created_at=100.0)
    overdue = TaskSnapshot(id="overdue", created_at=100.0, deadline_at=NOW - 86400 * 30)

    report = rank_report([plain, overdue], now=NOW)
    assert [r.dominance_count for r in report] == [0, 1]

    for seed in range(20):
        assert select_most_urgent([plain, overdue], random.Random(seed), now=NOW) is overdue


def test_older_task_dominates_newer_one() -> None:
    old = TaskSnapshot(id="old", created_at=100.0)
    new = TaskSnapshot(id="new", created_at=200.0)
    report = rank_report([new, old], now=NOW)
    assert [r.task.id for r in report] == ["new", "old"]
    assert [r.dominance_count for r in report] == [0, 1]


def test_deferring_makes_tasks_incomparable() -> None:
    old_deferred = TaskSnapshot(id="old", created_at=100.0, deferred_at=300.0)
    new = TaskSnapshot(id="new", created_at=200.0)
    report = rank_report([old_deferred, new], now=NOW)
    assert [r.dominance_count for r in report] == [0, 0]

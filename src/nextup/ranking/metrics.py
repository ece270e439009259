# src/nextup/ranking/metrics.py

from __future__ import annotations

"""
Metric extraction for the prioritization engine.

Every task snapshot maps to exactly one MetricVector. All axes follow the same
convention: a smaller value is more urgent. Missing optional fields map to
sentinels, never to None.
"""

import sys
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Final, NamedTuple

# "No pressure from this axis". Finite so comparisons stay total and the value
# survives JSON encoding.
NO_PRESSURE: Final[float] = sys.float_info.max


@dataclass(slots=True, frozen=True)
class TaskSnapshot:
    """Read-only view of a task, as much as the engine needs to rank it."""

    id: Hashable
    created_at: float
    deferred_at: float | None = None
    deadline_at: float | None = None


class MetricVector(NamedTuple):
    age: float
    stagnation: float
    time_to_deadline: float
    overdue: float


def derive_metrics(task: TaskSnapshot, *, now: float) -> MetricVector:
    """
    Build the metric vector of one task.

    - age: created_at itself (older creation time sorts first)
    - stagnation: deferred_at, or created_at for a never-deferred task
    - time_to_deadline: remaining seconds while the deadline is ahead, else NO_PRESSURE
    - overdue: deadline_at - now (negative) once the deadline has passed, else 0.0
    """
    created = float(task.created_at)
    stagnation = created if task.deferred_at is None else float(task.deferred_at)

    time_to_deadline = NO_PRESSURE
    overdue = 0.0
    if task.deadline_at is not None:
        delta = float(task.deadline_at) - float(now)
        if delta > 0:
            time_to_deadline = delta
        elif delta < 0:
            overdue = delta

    return MetricVector(
        age=created,
        stagnation=stagnation,
        time_to_deadline=time_to_deadline,
        overdue=overdue,
    )

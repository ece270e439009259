# src/nextup/ranking/dominance.py

from __future__ import annotations

"""
Pareto dominance counting.

A candidate dominates a target when it is no worse on every axis and strictly
better on at least one (lower is better everywhere). The winner is drawn from
the tasks that dominate the most others; ties are broken through the injected
random source, which is the only non-deterministic step.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from ..core.ports import RandomSource
from .metrics import MetricVector, TaskSnapshot, derive_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class RankedTask:
    """One row of a ranking report."""

    task: TaskSnapshot
    metrics: MetricVector
    dominance_count: int


def dominates(candidate: Sequence[float], target: Sequence[float]) -> bool:
    if len(candidate) != len(target):
        raise ValueError(
            f"metric vectors differ in length: {len(candidate)} != {len(target)}"
        )

    strictly_better = False
    for c, t in zip(candidate, target):
        if c > t:
            return False
        if c < t:
            strictly_better = True
    return strictly_better


def dominance_counts(vectors: Sequence[Sequence[float]]) -> list[int]:
    """For each vector, how many of the other vectors it dominates (full pairwise scan)."""
    counts = [0] * len(vectors)
    for i, candidate in enumerate(vectors):
        for j, target in enumerate(vectors):
            if i == j:
                continue
            if dominates(candidate, target):
                counts[i] += 1
    return counts


def select_most_dominant(
    items: Sequence[T],
    vectors: Sequence[Sequence[float]],
    rng: RandomSource,
) -> T | None:
    """
    Pick one item among those with the highest dominance count.

    items and vectors are parallel sequences. Candidates keep input order, so
    a stubbed rng selects a predictable item.
    """
    if len(items) != len(vectors):
        raise ValueError(f"got {len(items)} items but {len(vectors)} metric vectors")
    if not items:
        return None

    counts = dominance_counts(vectors)
    best = max(counts)
    candidates = [item for item, n in zip(items, counts) if n == best]

    pick = rng.randrange(len(candidates))
    logger.debug(
        "Dominance ranking: n=%d max_count=%d tied=%d pick=%d",
        len(items),
        best,
        len(candidates),
        pick,
    )
    return candidates[pick]


def select_most_urgent(
    tasks: Sequence[TaskSnapshot],
    rng: RandomSource,
    *,
    now: float,
) -> TaskSnapshot | None:
    """Return the task to surface next, or None when there is nothing to rank."""
    if not tasks:
        return None
    vectors = [derive_metrics(t, now=now) for t in tasks]
    return select_most_dominant(tasks, vectors, rng)


def rank_report(tasks: Sequence[TaskSnapshot], *, now: float) -> list[RankedTask]:
    """Metric vectors and dominance counts for every task, in input order."""
    vectors = [derive_metrics(t, now=now) for t in tasks]
    counts = dominance_counts(vectors)
    return [
        RankedTask(task=t, metrics=v, dominance_count=n)
        for t, v, n in zip(tasks, vectors, counts)
    ]

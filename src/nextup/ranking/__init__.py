"""
Task prioritization engine.

Components:
- metrics.py: TaskSnapshot, MetricVector and derive_metrics
- dominance.py: Pareto dominance counting and winner selection
"""

from .dominance import (
    RankedTask,
    dominance_counts,
    dominates,
    rank_report,
    select_most_dominant,
    select_most_urgent,
)
from .metrics import NO_PRESSURE, MetricVector, TaskSnapshot, derive_metrics

__all__ = [
    "NO_PRESSURE",
    "MetricVector",
    "RankedTask",
    "TaskSnapshot",
    "derive_metrics",
    "dominance_counts",
    "dominates",
    "rank_report",
    "select_most_dominant",
    "select_most_urgent",
]

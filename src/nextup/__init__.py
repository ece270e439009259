"""nextup: a personal task tracker that picks the next task by Pareto dominance."""

__version__ = "0.1.0"

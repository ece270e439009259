# src/nextup/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The ranking engine and the task API depend on Protocols instead of concrete
implementations, so storage and entropy sources stay swappable in tests.
"""

from typing import Any, Protocol


class RandomSource(Protocol):
    """Uniform integer generator over [0, k). random.Random satisfies it."""

    def randrange(self, k: int, /) -> int: ...


class TaskRepo(Protocol):
    def count_tasks(self, status: Any | None = None) -> int: ...

    def add_task(
            self,
            *,
            description: str,
            deadline_at: float | None = None,
            now_ts: float | None = None,
    ) -> int: ...

    def get_task(self, task_id: int) -> Any | None: ...
    def list_open_tasks(self, *, limit: int | None = None) -> list[Any]: ...

    def defer_task(self, task_id: int, *, now_ts: float | None = None) -> bool: ...
    def set_deadline(self, task_id: int, deadline_at: float | None) -> bool: ...
    def update_task_status(
            self,
            task_id: int,
            new_status: Any,
            *,
            now_ts: float | None = None,
    ) -> bool: ...

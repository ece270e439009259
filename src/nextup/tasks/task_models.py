# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ..ranking.metrics import TaskSnapshot


class TaskStatus(StrEnum):
    """Task lifecycle status. Only OPEN tasks take part in ranking."""

    OPEN = "open"
    DONE = "done"
    CANCELLED = "cancelled"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.OPEN
        try:
            return cls(raw)
        except ValueError:
            return cls.OPEN


@dataclass(slots=True)
class Task:
    id: int
    status: TaskStatus
    description: str

    created_at: float
    updated_at: float
    deferred_at: float | None
    deadline_at: float | None

    defer_count: int = 0
    completed_at: float | None = None

    def to_snapshot(self) -> TaskSnapshot:
        return TaskSnapshot(
            id=self.id,
            created_at=self.created_at,
            deferred_at=self.deferred_at,
            deadline_at=self.deadline_at,
        )

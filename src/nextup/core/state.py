# src/nextup/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import RandomSource, TaskRepo


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in with the same attributes).
    settings: object

    task_store: TaskRepo
    rng: RandomSource

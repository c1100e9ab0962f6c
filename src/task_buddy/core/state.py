# src/task_buddy/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import Clock, StatsRepo, TaskRepo


@dataclass
class AppState:
    """
    Everything a connector needs, built once in the composition root.

    The stats store is the single writer of the statistics snapshot;
    pass this object around instead of reaching for module globals.
    """

    # Store Settings on the state for easy access in other modules later.
    settings: object

    clock: Clock
    task_store: TaskRepo
    stats: StatsRepo

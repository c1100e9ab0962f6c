# src/task_buddy/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and time sources swappable and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol


class Clock(Protocol):
    """Wall-clock source. Tests substitute a fixed clock."""

    def now(self) -> datetime: ...


class KeyValueBackend(Protocol):
    """
    Durable key/value storage of small JSON documents.

    read() returns None when the key has never been written.
    """

    def read(self, key: str) -> str | None: ...
    def write(self, key: str, value: str) -> None: ...


class StatsRepo(Protocol):
    def load(self) -> Any: ...
    def on_app_load(self, now: datetime | None = None) -> Any: ...
    def on_task_completed(self, now: datetime | None = None) -> Any: ...


class TaskRepo(Protocol):
    def load_tasks(self) -> list[Any]: ...
    def save_tasks(self, tasks: Sequence[Any]) -> None: ...

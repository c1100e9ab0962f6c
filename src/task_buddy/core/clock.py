# src/task_buddy/core/clock.py

from __future__ import annotations

from datetime import datetime


class SystemClock:
    """Local wall-clock time. Calendar days are derived from this value as-is."""

    def now(self) -> datetime:
        return datetime.now()

# src/task_buddy/stats/stats_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any


def _parse_day(raw: Any) -> date | None:
    if not raw or not isinstance(raw, str):
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


def _non_negative_int(raw: Any) -> int:
    try:
        return max(0, int(raw))
    except (TypeError, ValueError, OverflowError):
        return 0


@dataclass(slots=True)
class UserStats:
    """
    Persisted productivity statistics.

    Dates are calendar days; they are stored as YYYY-MM-DD strings.
    last_login_date=None is stored as the empty string.
    """

    streak: int = 0
    last_login_date: date | None = None
    last_completion_date: date | None = None
    tasks_completed_total: int = 0

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "streak": self.streak,
            "lastLoginDate": self.last_login_date.isoformat() if self.last_login_date else "",
            "tasksCompletedTotal": self.tasks_completed_total,
        }
        if self.last_completion_date is not None:
            out["lastCompletionDate"] = self.last_completion_date.isoformat()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserStats:
        return cls(
            streak=_non_negative_int(data.get("streak")),
            last_login_date=_parse_day(data.get("lastLoginDate")),
            last_completion_date=_parse_day(data.get("lastCompletionDate")),
            tasks_completed_total=_non_negative_int(data.get("tasksCompletedTotal")),
        )

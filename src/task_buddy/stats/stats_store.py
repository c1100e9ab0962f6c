# src/task_buddy/stats/stats_store.py

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timedelta

from ..config import DEFAULT_STATS_KEY
from ..core.ports import Clock, KeyValueBackend
from .stats_models import UserStats

logger = logging.getLogger(__name__)


def _calendar_days(now: datetime | date) -> tuple[date, date]:
    """(today, yesterday) for the calendar day `now` falls on, without timezone conversion."""
    today = now.date() if isinstance(now, datetime) else now
    return today, today - timedelta(days=1)


class StatisticsStore:
    """
    Streak and completion counters backed by a single persisted snapshot.

    Driven by two lifecycle events:
    - on_app_load: once per application start, detects a broken streak
    - on_task_completed: once per task transition into "done"

    Every operation re-reads the snapshot, so callers never hold stale state.
    Calls must be serialized by the owner (one writer).
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        clock: Clock,
        *,
        key: str = DEFAULT_STATS_KEY,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self._key = key

    def load(self) -> UserStats:
        """Current snapshot, or defaults if nothing usable is stored. Never writes."""
        raw = self._backend.read(self._key)
        if raw is None:
            return UserStats()
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stats record key=%s is not valid JSON; using defaults.", self._key)
            return UserStats()
        if not isinstance(data, dict):
            logger.warning("Stats record key=%s is not an object; using defaults.", self._key)
            return UserStats()
        return UserStats.from_dict(data)

    def _save(self, stats: UserStats) -> None:
        self._backend.write(self._key, json.dumps(stats.to_dict()))

    def on_app_load(self, now: datetime | date | None = None) -> UserStats:
        stats = self.load()
        today, yesterday = _calendar_days(now if now is not None else self._clock.now())

        if stats.last_completion_date is not None:
            if stats.last_completion_date < yesterday:
                logger.info(
                    "Streak broken: last completion %s, today %s (was %d).",
                    stats.last_completion_date,
                    today,
                    stats.streak,
                )
                stats.streak = 0
                self._save(stats)
        elif (
            stats.last_login_date is not None
            and stats.last_login_date < yesterday
            and stats.streak > 0
        ):
            # Snapshots written before last_completion_date existed.
            logger.info(
                "Streak broken (legacy record): last login %s, today %s (was %d).",
                stats.last_login_date,
                today,
                stats.streak,
            )
            stats.streak = 0
            self._save(stats)

        if stats.last_login_date != today:
            stats.last_login_date = today
            self._save(stats)

        return stats

    def on_task_completed(self, now: datetime | date | None = None) -> UserStats:
        stats = self.load()
        today, yesterday = _calendar_days(now if now is not None else self._clock.now())

        if stats.last_completion_date == today:
            stats.tasks_completed_total += 1
        elif stats.last_completion_date == yesterday:
            stats.streak += 1
            stats.last_completion_date = today
            stats.tasks_completed_total += 1
        else:
            stats.streak = 1
            stats.last_completion_date = today
            stats.tasks_completed_total += 1

        self._save(stats)
        logger.debug(
            "Completion recorded day=%s streak=%d total=%d",
            today,
            stats.streak,
            stats.tasks_completed_total,
        )
        return stats

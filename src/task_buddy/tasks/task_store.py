# src/task_buddy/tasks/task_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from ..config import DEFAULT_TASKS_KEY
from ..core.ports import KeyValueBackend
from .task_models import (
    LinkAttachment,
    Priority,
    Reminder,
    ReminderMethod,
    Subtask,
    Task,
    TaskStatus,
)

logger = logging.getLogger(__name__)

_LEGACY_TYPE_CATEGORIES = {
    "PROFESSIONAL": "Professional",
    "HOBBY": "Hobby",
}


def _legacy_category(item: dict[str, Any]) -> str:
    """Records written before categories existed carry a fixed `type` instead."""
    cat = item.get("category")
    if isinstance(cat, str) and cat.strip():
        return cat.strip()
    return _LEGACY_TYPE_CATEGORIES.get(str(item.get("type") or "").upper(), "General")


class TaskStore:
    """
    Task list persisted as one JSON array under a single key.

    The list order is the user's manual order and is preserved as-is.
    Field names on disk are camelCase (shared with the stats record format).
    """

    def __init__(self, backend: KeyValueBackend, *, key: str = DEFAULT_TASKS_KEY) -> None:
        self._backend = backend
        self._key = key

    # ---- serialization ----

    @staticmethod
    def _task_to_dict(task: Task) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": task.id,
            "title": task.title,
            "deadline": task.deadline,
            "category": task.category,
            "status": task.status.value,
            "priority": task.priority.value,
            "createdAt": task.created_at,
            "subtasks": [
                {"id": s.id, "title": s.title, "completed": s.completed} for s in task.subtasks
            ],
            "links": [{"url": link.url, "title": link.title} for link in task.links],
        }
        if task.description is not None:
            out["description"] = task.description
        if task.completed_at is not None:
            out["completedAt"] = task.completed_at
        if task.reminder is not None:
            out["reminder"] = {
                "dateTime": task.reminder.date_time,
                "method": task.reminder.method.value,
                "notified": task.reminder.notified,
            }
        return out

    @staticmethod
    def _dict_to_task(item: dict[str, Any]) -> Task:
        subtasks = [
            Subtask(id=str(s["id"]), title=str(s.get("title") or ""), completed=bool(s.get("completed")))
            for s in (item.get("subtasks") or [])
            if isinstance(s, dict) and s.get("id") is not None
        ]
        links = [
            LinkAttachment(url=str(lk["url"]), title=str(lk.get("title") or lk["url"]))
            for lk in (item.get("links") or [])
            if isinstance(lk, dict) and lk.get("url")
        ]

        reminder = None
        raw_reminder = item.get("reminder")
        if isinstance(raw_reminder, dict) and raw_reminder.get("dateTime"):
            reminder = Reminder(
                date_time=str(raw_reminder["dateTime"]),
                method=ReminderMethod.from_db(raw_reminder.get("method")),
                notified=bool(raw_reminder.get("notified")),
            )

        completed_at = item.get("completedAt")
        description = item.get("description")

        return Task(
            id=str(item["id"]),
            title=str(item.get("title") or ""),
            deadline=str(item.get("deadline") or ""),
            category=_legacy_category(item),
            status=TaskStatus.from_db(item.get("status")),
            priority=Priority.from_db(item.get("priority")),
            created_at=int(item.get("createdAt") or 0),
            description=str(description) if description is not None else None,
            completed_at=int(completed_at) if completed_at is not None else None,
            subtasks=subtasks,
            links=links,
            reminder=reminder,
        )

    # ---- public API ----

    def load_tasks(self) -> list[Task]:
        raw = self._backend.read(self._key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Task list key=%s is not valid JSON; starting empty.", self._key)
            return []
        if not isinstance(data, list):
            logger.warning("Task list key=%s is not an array; starting empty.", self._key)
            return []

        tasks: list[Task] = []
        for item in data:
            if not isinstance(item, dict) or item.get("id") is None:
                logger.warning("Skipping malformed task record: %r", item)
                continue
            try:
                tasks.append(self._dict_to_task(item))
            except (TypeError, ValueError, KeyError, OverflowError):
                logger.warning("Skipping malformed task record id=%s", item.get("id"), exc_info=True)
        return tasks

    def save_tasks(self, tasks: Sequence[Task]) -> None:
        payload = json.dumps([self._task_to_dict(t) for t in tasks], ensure_ascii=False)
        self._backend.write(self._key, payload)
        logger.debug("Saved %d tasks key=%s", len(tasks), self._key)

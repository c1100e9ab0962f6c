# src/task_buddy/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - "AWAITING_RESULT" is for actions already taken whose outcome is pending.
    - only the transition into DONE is reported to the statistics engine.
    """

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    AWAITING_RESULT = "AWAITING_RESULT"
    DONE = "DONE"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(str(raw).upper())
        except ValueError:
            return cls.TODO


class Priority(StrEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).upper())
        except ValueError:
            return cls.MEDIUM


class ReminderMethod(StrEnum):
    NOTIFICATION = "NOTIFICATION"
    WHATSAPP = "WHATSAPP"
    CALENDAR = "CALENDAR"

    @classmethod
    def from_db(cls, raw: str | None) -> ReminderMethod:
        if not raw:
            return cls.NOTIFICATION
        try:
            return cls(str(raw).upper())
        except ValueError:
            return cls.NOTIFICATION


@dataclass(slots=True)
class Subtask:
    id: str
    title: str
    completed: bool = False


@dataclass(slots=True)
class LinkAttachment:
    url: str
    title: str


@dataclass(slots=True)
class Reminder:
    date_time: str  # ISO date-time
    method: ReminderMethod = ReminderMethod.NOTIFICATION
    notified: bool = False


@dataclass(slots=True)
class Task:
    id: str
    title: str
    deadline: str  # ISO date or date-time
    category: str
    status: TaskStatus
    priority: Priority
    created_at: int  # epoch ms

    description: str | None = None
    completed_at: int | None = None  # epoch ms, set while status is DONE

    subtasks: list[Subtask] = field(default_factory=list)
    links: list[LinkAttachment] = field(default_factory=list)
    reminder: Reminder | None = None

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

# src/task_buddy/tasks/task_api.py

"""
High-level task operations used by connectors.

This module is the task lifecycle owner: it reports
- the app-load event (open_app) once per start,
- a completion event once per transition of a task into DONE.
Restoring a DONE task never rolls statistics back.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import datetime
from typing import Any

from ..core.state import AppState
from .task_models import LinkAttachment, Priority, Reminder, ReminderMethod, Subtask, Task, TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ("Professional", "Hobby")
ALL_CATEGORIES = "ALL"

_EDITABLE_FIELDS = frozenset(
    {"title", "description", "deadline", "category", "priority", "subtasks", "links", "reminder"}
)


class TaskNotFoundError(KeyError):
    """No task matches the given id (or id prefix)."""


def new_id() -> str:
    return uuid.uuid4().hex


def _epoch_ms(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def find_task(tasks: Sequence[Task], ref: str) -> Task:
    """Exact id match first, then a unique id prefix."""
    ref = (ref or "").strip()
    if not ref:
        raise TaskNotFoundError("empty task id")
    for t in tasks:
        if t.id == ref:
            return t
    matches = [t for t in tasks if t.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise TaskNotFoundError(f"task id prefix {ref!r} is ambiguous ({len(matches)} matches)")
    raise TaskNotFoundError(f"no task with id {ref!r}")


def _replace_task(tasks: list[Task], updated: Task) -> list[Task]:
    return [updated if t.id == updated.id else t for t in tasks]


# ---- lifecycle events ----


def open_app(state: AppState) -> Any:
    """App-load event: call once per process start, before any completion."""
    stats = state.stats.on_app_load(state.clock.now())
    logger.info(
        "App opened: streak=%s total=%s", stats.streak, stats.tasks_completed_total
    )
    return stats


# ---- CRUD ----


def create_task(
    state: AppState,
    *,
    title: str,
    deadline: str,
    category: str = "General",
    priority: Priority = Priority.MEDIUM,
    description: str | None = None,
    subtasks: Iterable[str | Subtask] = (),
    links: Iterable[LinkAttachment] = (),
    reminder: Reminder | None = None,
) -> Task:
    if not title or not title.strip():
        raise ValueError("title is required")

    subs = [s if isinstance(s, Subtask) else Subtask(id=new_id(), title=str(s)) for s in subtasks]

    task = Task(
        id=new_id(),
        title=title.strip(),
        deadline=(deadline or "").strip(),
        category=(category or "").strip() or "General",
        status=TaskStatus.TODO,
        priority=priority,
        created_at=_epoch_ms(state.clock.now()),
        description=description,
        subtasks=subs,
        links=list(links),
        reminder=reminder,
    )

    tasks = state.task_store.load_tasks()
    # Newest first.
    state.task_store.save_tasks([task, *tasks])
    logger.info("Task created id=%s category=%s priority=%s", task.id, task.category, task.priority)
    return task


def edit_task(state: AppState, task_id: str, **fields: Any) -> Task:
    unknown = set(fields) - _EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"fields not editable: {', '.join(sorted(unknown))}")
    if "title" in fields and not str(fields["title"] or "").strip():
        raise ValueError("title is required")

    tasks = state.task_store.load_tasks()
    task = find_task(tasks, task_id)
    updated = replace(task, **fields)
    state.task_store.save_tasks(_replace_task(tasks, updated))
    logger.debug("Task edited id=%s fields=%s", task.id, sorted(fields))
    return updated


def set_task_status(state: AppState, task_id: str, status: TaskStatus) -> Task:
    tasks = state.task_store.load_tasks()
    task = find_task(tasks, task_id)
    now = state.clock.now()

    entering_done = status == TaskStatus.DONE and task.status != TaskStatus.DONE
    if status == TaskStatus.DONE:
        completed_at = task.completed_at if task.status == TaskStatus.DONE else _epoch_ms(now)
    else:
        completed_at = None

    updated = replace(task, status=status, completed_at=completed_at)
    state.task_store.save_tasks(_replace_task(tasks, updated))

    if entering_done:
        try:
            stats = state.stats.on_task_completed(now)
        except Exception:
            # A task is only DONE once its completion is counted.
            state.task_store.save_tasks(tasks)
            logger.warning("Completion not recorded; task id=%s left as %s", task.id, task.status)
            raise
        logger.info(
            "Task done id=%s streak=%s total=%s",
            task.id,
            stats.streak,
            stats.tasks_completed_total,
        )
    else:
        logger.debug("Task status id=%s %s -> %s", task.id, task.status, status)
    return updated


def complete_task(state: AppState, task_id: str) -> Task:
    return set_task_status(state, task_id, TaskStatus.DONE)


def restore_task(state: AppState, task_id: str) -> Task:
    return set_task_status(state, task_id, TaskStatus.TODO)


def toggle_subtask(state: AppState, task_id: str, subtask_id: str) -> Task:
    tasks = state.task_store.load_tasks()
    task = find_task(tasks, task_id)

    ref = (subtask_id or "").strip()
    target = next((s for s in task.subtasks if s.id == ref), None)
    if target is None and ref:
        prefixed = [s for s in task.subtasks if s.id.startswith(ref)]
        if len(prefixed) == 1:
            target = prefixed[0]
    if target is None:
        raise TaskNotFoundError(f"no subtask {subtask_id!r} in task {task.id}")

    subs = [replace(s, completed=not s.completed) if s is target else s for s in task.subtasks]
    updated = replace(task, subtasks=subs)
    state.task_store.save_tasks(_replace_task(tasks, updated))
    return updated


def add_link(state: AppState, task_id: str, url: str, title: str | None = None) -> Task:
    url = (url or "").strip()
    if not url:
        raise ValueError("url is required")
    task = find_task(state.task_store.load_tasks(), task_id)
    link = LinkAttachment(url=url, title=(title or "").strip() or url)
    return edit_task(state, task.id, links=[*task.links, link])


def set_reminder(
    state: AppState,
    task_id: str,
    date_time: str | None,
    method: ReminderMethod = ReminderMethod.NOTIFICATION,
) -> Task:
    """Set (or clear, with date_time=None) a task's reminder. A new reminder has not fired yet."""
    if date_time is None:
        return edit_task(state, task_id, reminder=None)
    date_time = date_time.strip()
    try:
        datetime.fromisoformat(date_time.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"not an ISO date-time: {date_time!r}") from None
    return edit_task(state, task_id, reminder=Reminder(date_time=date_time, method=method))


def move_task(state: AppState, task_id: str, index: int) -> Task:
    """Move a task to position `index` (0-based, clamped) in the stored manual order."""
    tasks = state.task_store.load_tasks()
    task = find_task(tasks, task_id)
    rest = [t for t in tasks if t.id != task.id]
    index = max(0, min(int(index), len(rest)))
    rest.insert(index, task)
    state.task_store.save_tasks(rest)
    logger.debug("Task moved id=%s index=%d", task.id, index)
    return task


def delete_task(state: AppState, task_id: str) -> bool:
    tasks = state.task_store.load_tasks()
    try:
        task = find_task(tasks, task_id)
    except TaskNotFoundError:
        return False
    state.task_store.save_tasks([t for t in tasks if t.id != task.id])
    logger.info("Task deleted id=%s", task.id)
    return True


# ---- views ----


def filter_tasks(
    tasks: Iterable[Task], *, category: str | None = None, query: str | None = None
) -> list[Task]:
    """Category None/"ALL" matches any; query matches title or description (case-insensitive)."""
    q = (query or "").strip().lower()
    out: list[Task] = []
    for t in tasks:
        if category and category != ALL_CATEGORIES and t.category != category:
            continue
        if q and q not in t.title.lower() and q not in (t.description or "").lower():
            continue
        out.append(t)
    return out


def split_active_done(tasks: Iterable[Task]) -> tuple[list[Task], list[Task]]:
    """Active tasks in stored order; done tasks newest completion first."""
    active: list[Task] = []
    done: list[Task] = []
    for t in tasks:
        (done if t.is_done else active).append(t)
    done.sort(key=lambda t: t.completed_at or 0, reverse=True)
    return active, done


def categories(tasks: Iterable[Task]) -> list[str]:
    out = list(DEFAULT_CATEGORIES)
    for t in tasks:
        if t.category not in out:
            out.append(t.category)
    return out


def category_breakdown(tasks: Sequence[Task]) -> dict[str, int]:
    counts = {c: 0 for c in categories(tasks)}
    for t in tasks:
        counts[t.category] += 1
    return counts


# ---- reminders ----


def _to_local_minute(raw: str, now: datetime) -> datetime | None:
    try:
        dt = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is not None and now.tzinfo is None:
        dt = dt.astimezone().replace(tzinfo=None)
    elif dt.tzinfo is None and now.tzinfo is not None:
        dt = dt.replace(tzinfo=now.tzinfo)
    return dt.replace(second=0, microsecond=0)


def collect_due_reminders(state: AppState, now: datetime | None = None) -> list[Task]:
    """
    Notification reminders due at or before the current minute that have not fired yet.

    Returned tasks are marked notified (and saved) so each fires once.
    Delivery is up to the caller.
    """
    if now is None:
        now = state.clock.now()
    current_minute = now.replace(second=0, microsecond=0)

    tasks = state.task_store.load_tasks()
    due: list[Task] = []
    updated_tasks: list[Task] = []
    for t in tasks:
        r = t.reminder
        if (
            r is not None
            and not r.notified
            and r.method == ReminderMethod.NOTIFICATION
            and not t.is_done
        ):
            at = _to_local_minute(r.date_time, now)
            if at is None:
                logger.debug("Unparseable reminder time task=%s value=%r", t.id, r.date_time)
            elif at <= current_minute:
                t = replace(t, reminder=replace(r, notified=True))
                due.append(t)
        updated_tasks.append(t)

    if due:
        state.task_store.save_tasks(updated_tasks)
        logger.info("Reminders due: %d", len(due))
    return due

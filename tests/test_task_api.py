# tests/test_task_api.py

from __future__ import annotations

from datetime import date, datetime

import pytest

from task_buddy.core.state import AppState
from task_buddy.stats.stats_store import StatisticsStore
from task_buddy.tasks import task_api
from task_buddy.tasks.task_api import TaskNotFoundError
from task_buddy.tasks.task_models import Priority, Reminder, ReminderMethod, TaskStatus
from task_buddy.tasks.task_store import TaskStore

from .fakes import FailingBackend, InMemoryBackend


def test_create_task_prepends_and_persists(state) -> None:
    first = task_api.create_task(state, title="First", deadline="2024-01-05")
    second = task_api.create_task(
        state,
        title="  Second  ",
        deadline="2024-01-06",
        category="Hobby",
        priority=Priority.HIGH,
        subtasks=["a", "b"],
    )

    tasks = state.task_store.load_tasks()
    assert [t.id for t in tasks] == [second.id, first.id]
    assert tasks[0].title == "Second"
    assert tasks[0].status == TaskStatus.TODO
    assert [s.title for s in tasks[0].subtasks] == ["a", "b"]
    assert tasks[0].created_at == int(datetime(2024, 1, 1, 9, 0).timestamp() * 1000)


def test_create_task_requires_title(state) -> None:
    with pytest.raises(ValueError):
        task_api.create_task(state, title="   ", deadline="")


def test_completion_counts_once_per_transition(state) -> None:
    task = task_api.create_task(state, title="Ship it", deadline="")

    done = task_api.complete_task(state, task.id)
    again = task_api.complete_task(state, task.id)

    stats = state.stats.load()
    assert stats.tasks_completed_total == 1
    assert stats.streak == 1
    assert done.completed_at is not None
    assert again.completed_at == done.completed_at


def test_restore_does_not_roll_back_stats(state, clock) -> None:
    task = task_api.create_task(state, title="Flip", deadline="")

    task_api.complete_task(state, task.id)
    restored = task_api.restore_task(state, task.id)
    assert restored.status == TaskStatus.TODO
    assert restored.completed_at is None

    clock.advance(hours=1)
    task_api.complete_task(state, task.id)

    stats = state.stats.load()
    assert stats.tasks_completed_total == 2
    assert stats.streak == 1


def test_streak_through_task_api_over_days(state, clock) -> None:
    a = task_api.create_task(state, title="a", deadline="")
    b = task_api.create_task(state, title="b", deadline="")
    c = task_api.create_task(state, title="c", deadline="")

    task_api.open_app(state)
    task_api.complete_task(state, a.id)

    clock.advance(days=1)
    task_api.open_app(state)
    task_api.complete_task(state, b.id)
    assert state.stats.load().streak == 2

    clock.advance(days=3)
    stats = task_api.open_app(state)
    assert stats.streak == 0
    assert stats.last_login_date == date(2024, 1, 5)

    task_api.complete_task(state, c.id)
    stats = state.stats.load()
    assert (stats.streak, stats.tasks_completed_total) == (1, 3)


def test_other_status_changes_do_not_count(state) -> None:
    task = task_api.create_task(state, title="x", deadline="")
    task_api.set_task_status(state, task.id, TaskStatus.IN_PROGRESS)
    task_api.set_task_status(state, task.id, TaskStatus.AWAITING_RESULT)
    assert state.stats.load().tasks_completed_total == 0


def test_find_task_by_prefix(state) -> None:
    task = task_api.create_task(state, title="x", deadline="")
    tasks = state.task_store.load_tasks()

    assert task_api.find_task(tasks, task.id[:6]).id == task.id
    with pytest.raises(TaskNotFoundError):
        task_api.find_task(tasks, "zzzz-not-there")
    with pytest.raises(TaskNotFoundError):
        task_api.complete_task(state, "zzzz-not-there")


def test_edit_task_and_rejects_unknown_fields(state) -> None:
    task = task_api.create_task(state, title="old", deadline="")

    updated = task_api.edit_task(state, task.id, title="new", priority=Priority.LOW)
    assert (updated.title, updated.priority) == ("new", Priority.LOW)
    assert state.task_store.load_tasks()[0].title == "new"

    with pytest.raises(ValueError):
        task_api.edit_task(state, task.id, status=TaskStatus.DONE)


def test_toggle_subtask_and_delete(state) -> None:
    task = task_api.create_task(state, title="t", deadline="", subtasks=["one", "two"])
    sub = task.subtasks[1]

    toggled = task_api.toggle_subtask(state, task.id, sub.id)
    assert [s.completed for s in toggled.subtasks] == [False, True]
    toggled = task_api.toggle_subtask(state, task.id, sub.id)
    assert [s.completed for s in toggled.subtasks] == [False, False]

    with pytest.raises(TaskNotFoundError):
        task_api.toggle_subtask(state, task.id, "nope")

    assert task_api.delete_task(state, task.id) is True
    assert task_api.delete_task(state, task.id) is False
    assert state.task_store.load_tasks() == []


def test_views_filter_split_and_categories(state, clock) -> None:
    work = task_api.create_task(state, title="Budget review", deadline="", category="Professional")
    guitar = task_api.create_task(
        state, title="Practice", deadline="", category="Music", description="scales and BUDGET chords"
    )
    task_api.create_task(state, title="Paint", deadline="", category="Hobby")
    tasks_before = state.task_store.load_tasks()

    assert [t.id for t in task_api.filter_tasks(tasks_before, category="Music")] == [guitar.id]
    assert len(task_api.filter_tasks(tasks_before, category="ALL")) == 3
    assert {t.id for t in task_api.filter_tasks(tasks_before, query="budget")} == {work.id, guitar.id}

    task_api.complete_task(state, work.id)
    clock.advance(minutes=5)
    task_api.complete_task(state, guitar.id)

    active, done = task_api.split_active_done(state.task_store.load_tasks())
    assert [t.title for t in active] == ["Paint"]
    assert [t.id for t in done] == [guitar.id, work.id]

    tasks = state.task_store.load_tasks()
    assert task_api.categories(tasks) == ["Professional", "Hobby", "Music"]
    assert task_api.category_breakdown(tasks) == {"Professional": 1, "Hobby": 1, "Music": 1}


def test_collect_due_reminders_fires_once(state, clock) -> None:
    due = task_api.create_task(
        state,
        title="Call bank",
        deadline="",
        reminder=Reminder(date_time="2024-01-01T09:00:00"),
    )
    task_api.create_task(
        state,
        title="Later",
        deadline="",
        reminder=Reminder(date_time="2024-01-01T10:30:00"),
    )
    task_api.create_task(
        state,
        title="Calendar only",
        deadline="",
        reminder=Reminder(date_time="2024-01-01T08:00:00", method=ReminderMethod.CALENDAR),
    )

    fired = task_api.collect_due_reminders(state)
    assert [t.id for t in fired] == [due.id]
    assert task_api.collect_due_reminders(state) == []

    clock.set(datetime(2024, 1, 1, 10, 30, 45))
    assert [t.title for t in task_api.collect_due_reminders(state)] == ["Later"]

    stored = {t.title: t for t in state.task_store.load_tasks()}
    assert stored["Call bank"].reminder.notified is True
    assert stored["Calendar only"].reminder.notified is False


def test_failed_completion_leaves_task_open(clock) -> None:
    tasks_backend = InMemoryBackend()
    state = AppState(
        settings=None,
        clock=clock,
        task_store=TaskStore(tasks_backend),
        stats=StatisticsStore(FailingBackend(), clock),
    )
    task = task_api.create_task(state, title="Pay rent", deadline="")

    with pytest.raises(OSError):
        task_api.complete_task(state, task.id)

    stored = state.task_store.load_tasks()[0]
    assert stored.status == TaskStatus.TODO
    assert stored.completed_at is None

    # once the stats backend works again, the same task still counts
    state.stats = StatisticsStore(InMemoryBackend(), clock)
    task_api.complete_task(state, task.id)
    assert state.stats.load().tasks_completed_total == 1


def test_move_task_reorders_and_clamps(state) -> None:
    c = task_api.create_task(state, title="c", deadline="")
    b = task_api.create_task(state, title="b", deadline="")
    a = task_api.create_task(state, title="a", deadline="")

    def order() -> list[str]:
        return [t.title for t in state.task_store.load_tasks()]

    assert order() == ["a", "b", "c"]
    task_api.move_task(state, a.id, 2)
    assert order() == ["b", "c", "a"]
    task_api.move_task(state, c.id, 0)
    assert order() == ["c", "b", "a"]
    task_api.move_task(state, b.id, 99)
    assert order() == ["c", "a", "b"]
    task_api.move_task(state, b.id, -5)
    assert order() == ["b", "c", "a"]


def test_set_reminder_link_and_clear(state) -> None:
    task = task_api.create_task(state, title="Dentist", deadline="2024-01-03")

    with pytest.raises(ValueError):
        task_api.set_reminder(state, task.id, "tomorrow-ish")

    task_api.set_reminder(state, task.id, "2024-01-01T08:30", ReminderMethod.CALENDAR)
    task_api.add_link(state, task.id, "https://clinic.example", "booking")
    with pytest.raises(ValueError):
        task_api.add_link(state, task.id, "  ")

    stored = state.task_store.load_tasks()[0]
    assert stored.reminder == Reminder(date_time="2024-01-01T08:30", method=ReminderMethod.CALENDAR)
    assert [(lk.url, lk.title) for lk in stored.links] == [("https://clinic.example", "booking")]

    cleared = task_api.set_reminder(state, task.id, None)
    assert cleared.reminder is None
    assert state.task_store.load_tasks()[0].reminder is None

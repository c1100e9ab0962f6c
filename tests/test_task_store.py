# tests/test_task_store.py

from __future__ import annotations

import json

from task_buddy.tasks.task_models import (
    LinkAttachment,
    Priority,
    Reminder,
    ReminderMethod,
    Subtask,
    Task,
    TaskStatus,
)
from task_buddy.tasks.task_store import TaskStore

from .fakes import InMemoryBackend

KEY = "your_buddy_tasks"


def test_task_store_saves_and_loads_full_record() -> None:
    backend = InMemoryBackend()
    store = TaskStore(backend, key=KEY)
    task = Task(
        id="t1",
        title="Write report",
        deadline="2024-01-10",
        category="Professional",
        status=TaskStatus.DONE,
        priority=Priority.HIGH,
        created_at=1704067200000,
        description="quarterly",
        completed_at=1704153600000,
        subtasks=[Subtask(id="s1", title="outline", completed=True)],
        links=[LinkAttachment(url="https://example.com", title="brief")],
        reminder=Reminder(date_time="2024-01-09T09:00", method=ReminderMethod.CALENDAR),
    )

    store.save_tasks([task])

    raw = json.loads(backend.data[KEY])
    assert raw[0]["createdAt"] == 1704067200000
    assert raw[0]["reminder"] == {"dateTime": "2024-01-09T09:00", "method": "CALENDAR", "notified": False}
    assert store.load_tasks() == [task]


def test_task_store_empty_and_corrupt() -> None:
    assert TaskStore(InMemoryBackend(), key=KEY).load_tasks() == []
    assert TaskStore(InMemoryBackend({KEY: "{oops"}), key=KEY).load_tasks() == []
    assert TaskStore(InMemoryBackend({KEY: '{"id": "x"}'}), key=KEY).load_tasks() == []


def test_task_store_migrates_legacy_type_to_category() -> None:
    legacy = [
        {"id": "a", "title": "A", "deadline": "", "type": "PROFESSIONAL", "status": "TODO", "priority": "LOW", "createdAt": 1},
        {"id": "b", "title": "B", "deadline": "", "type": "HOBBY", "status": "TODO", "priority": "LOW", "createdAt": 2},
        {"id": "c", "title": "C", "deadline": "", "status": "TODO", "priority": "LOW", "createdAt": 3},
        {"id": "d", "title": "D", "deadline": "", "category": "Garden", "type": "HOBBY", "createdAt": 4},
    ]
    tasks = TaskStore(InMemoryBackend({KEY: json.dumps(legacy)}), key=KEY).load_tasks()

    assert [t.category for t in tasks] == ["Professional", "Hobby", "General", "Garden"]
    # missing collections and unknown enums get defaults
    assert tasks[3].status == TaskStatus.TODO
    assert tasks[3].priority == Priority.MEDIUM
    assert tasks[3].subtasks == []
    assert tasks[3].links == []


def test_task_store_skips_malformed_records_and_keeps_order() -> None:
    data = [
        {"id": "z", "title": "last", "createdAt": 1},
        "garbage",
        {"title": "no id"},
        {"id": "y", "title": "bad ts", "createdAt": "not-a-number"},
        {"id": "a", "title": "first", "createdAt": 2},
    ]
    raw = json.dumps(data)[:-1]
    # 1e400 decodes to float infinity.
    raw += ', {"id": "big", "createdAt": 1e400}, {"id": "done", "createdAt": 3, "completedAt": 1e400}]'
    tasks = TaskStore(InMemoryBackend({KEY: raw}), key=KEY).load_tasks()
    assert [t.id for t in tasks] == ["z", "a"]

# src/task_buddy/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_api import TaskNotFoundError
from ..tasks.task_models import Priority, ReminderMethod, Subtask, Task, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SHORT_ID = 8

_STATUS_ALIASES = {
    "todo": TaskStatus.TODO,
    "doing": TaskStatus.IN_PROGRESS,
    "in_progress": TaskStatus.IN_PROGRESS,
    "progress": TaskStatus.IN_PROGRESS,
    "waiting": TaskStatus.AWAITING_RESULT,
    "awaiting": TaskStatus.AWAITING_RESULT,
    "awaiting_result": TaskStatus.AWAITING_RESULT,
    "done": TaskStatus.DONE,
}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskNotFoundError as e:
            return f"Not found: {e.args[0] if e.args else e}"
        except ValueError as e:
            return f"Invalid input: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    box = "[x]" if task.is_done else "[ ]"
    bits = [task.category, task.priority.value]
    if task.deadline:
        bits.append(f"due {task.deadline}")
    if task.status not in (TaskStatus.TODO, TaskStatus.DONE):
        bits.append(task.status.value.lower())
    line = f"{task.id[:SHORT_ID]} {box} {task.title} ({', '.join(bits)})"
    if task.subtasks:
        done = sum(1 for s in task.subtasks if s.completed)
        line += f" {done}/{len(task.subtasks)} subtasks"
    return line


def _format_list(tasks: list[Task], empty: str) -> str:
    active, done = task_api.split_active_done(tasks)
    if not active and not done:
        return empty
    lines: list[str] = []
    if active:
        lines.append(f"Active ({len(active)}):")
        lines.extend(f"  {format_task(t)}" for t in active)
    if done:
        lines.append(f"History ({len(done)}):")
        lines.extend(f"  {format_task(t)}" for t in done)
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title | deadline | category | priority
    Only the title is required.
    """
    fields = [f.strip() for f in " ".join(args).split("|")]
    if not fields or not fields[0]:
        return "Usage: /add <title> [| deadline | category | priority]"

    title = fields[0]
    deadline = fields[1] if len(fields) > 1 else ""
    category = fields[2] if len(fields) > 2 and fields[2] else "General"
    priority = Priority.from_db(fields[3]) if len(fields) > 3 else Priority.MEDIUM

    task = task_api.create_task(
        state, title=title, deadline=deadline, category=category, priority=priority
    )
    return f"Added {format_task(task)}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list            -> every task
    /list <category> -> only that category
    """
    category = " ".join(args).strip() or None
    tasks = task_api.filter_tasks(state.task_store.load_tasks(), category=category)
    return _format_list(tasks, "No tasks yet. Use /add to create one.")


def cmd_find(state: AppState, args: list[str]) -> str:
    query = " ".join(args).strip()
    if not query:
        return "Usage: /find <text>"
    tasks = task_api.filter_tasks(state.task_store.load_tasks(), query=query)
    return _format_list(tasks, f"No tasks match {query!r}.")


def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /done <id>"
    before = state.stats.load()
    task = task_api.complete_task(state, args[0])
    after = state.stats.load()
    if emit is not None and after.streak > before.streak:
        emit(f"Streak is now {after.streak} day(s)!")
    return f"Done: {format_task(task)}"


def cmd_undo(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /undo <id>"
    task = task_api.restore_task(state, args[0])
    return f"Restored: {format_task(task)}"


def cmd_status(state: AppState, args: list[str]) -> str:
    """
    /status <id> todo|doing|waiting|done
    """
    if len(args) < 2:
        return "Usage: /status <id> todo|doing|waiting|done"
    status = _STATUS_ALIASES.get(args[1].lower())
    if status is None:
        return f"Unknown status {args[1]!r}. Use todo, doing, waiting or done."
    task = task_api.set_task_status(state, args[0], status)
    return f"Updated: {format_task(task)}"


def cmd_sub(state: AppState, args: list[str]) -> str:
    """
    /sub <task_id> add <title> -> add a subtask
    /sub <task_id> <sub_id>    -> toggle a subtask
    """
    if len(args) < 2:
        return "Usage: /sub <task_id> <subtask_id> | /sub <task_id> add <title>"

    if args[1].lower() == "add":
        title = " ".join(args[2:]).strip()
        if not title:
            return "Usage: /sub <task_id> add <title>"
        task = task_api.find_task(state.task_store.load_tasks(), args[0])
        subs = [*task.subtasks, Subtask(id=task_api.new_id(), title=title)]
        task = task_api.edit_task(state, task.id, subtasks=subs)
    else:
        task = task_api.toggle_subtask(state, args[0], args[1])

    lines = [format_task(task)]
    for s in task.subtasks:
        lines.append(f"    {s.id[:SHORT_ID]} {'[x]' if s.completed else '[ ]'} {s.title}")
    return "\n".join(lines)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <id>"
    task = task_api.find_task(state.task_store.load_tasks(), args[0])
    lines = [format_task(task)]
    if task.description:
        lines.append(f"  {task.description}")
    for s in task.subtasks:
        lines.append(f"    {s.id[:SHORT_ID]} {'[x]' if s.completed else '[ ]'} {s.title}")
    for link in task.links:
        lines.append(f"  link: {link.title} <{link.url}>")
    if task.reminder is not None:
        fired = " (sent)" if task.reminder.notified else ""
        lines.append(f"  reminder: {task.reminder.date_time} via {task.reminder.method.value.lower()}{fired}")
    return "\n".join(lines)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> title|deadline|description|category|priority <value>
    An empty value clears the deadline or description.
    """
    if len(args) < 2:
        return "Usage: /edit <id> title|deadline|description|category|priority <value>"

    field = args[1].lower()
    value = " ".join(args[2:]).strip()

    if field == "title":
        changes = {"title": value}
    elif field in ("deadline", "due"):
        changes = {"deadline": value}
    elif field in ("description", "desc"):
        changes = {"description": value or None}
    elif field in ("category", "cat"):
        changes = {"category": value or "General"}
    elif field == "priority":
        changes = {"priority": Priority.from_db(value)}
    else:
        return f"Unknown field {args[1]!r}. Use title, deadline, description, category or priority."

    task = task_api.edit_task(state, args[0], **changes)
    return f"Updated: {format_task(task)}"


def cmd_link(state: AppState, args: list[str]) -> str:
    """
    /link <id> <url> [title]
    """
    if len(args) < 2:
        return "Usage: /link <id> <url> [title]"
    task = task_api.add_link(state, args[0], args[1], " ".join(args[2:]))
    return f"Linked: {format_task(task)} ({len(task.links)} link(s))"


def cmd_remind(state: AppState, args: list[str]) -> str:
    """
    /remind <id> <ISO date-time> [notification|whatsapp|calendar]
    /remind <id> off
    """
    if len(args) < 2:
        return "Usage: /remind <id> <YYYY-MM-DDTHH:MM> [method] | /remind <id> off"

    if args[1].lower() in ("off", "none", "clear"):
        task = task_api.set_reminder(state, args[0], None)
        return f"Reminder cleared: {format_task(task)}"

    method = ReminderMethod.from_db(args[2]) if len(args) > 2 else ReminderMethod.NOTIFICATION
    task = task_api.set_reminder(state, args[0], args[1], method)
    return f"Reminder set for {args[1]}: {format_task(task)}"


def cmd_move(state: AppState, args: list[str]) -> str:
    """
    /move <id> <position>   (1 = top of the list)
    """
    if len(args) < 2:
        return "Usage: /move <id> <position>"
    try:
        position = int(args[1])
    except ValueError:
        return f"Position must be a number, got {args[1]!r}."
    task = task_api.move_task(state, args[0], position - 1)
    return f"Moved: {format_task(task)}"


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    if task_api.delete_task(state, args[0]):
        return "Task deleted."
    return f"No task with id {args[0]!r}."


def cmd_stats(state: AppState, args: list[str]) -> str:
    stats = state.stats.load()
    tasks = state.task_store.load_tasks()
    active, done = task_api.split_active_done(tasks)
    last = stats.last_completion_date.isoformat() if stats.last_completion_date else "never"
    return (
        "Stats:\n"
        f"  Streak: {stats.streak} day(s)\n"
        f"  Completed (lifetime): {stats.tasks_completed_total}\n"
        f"  Last completion: {last}\n"
        f"  Open / done now: {len(active)} / {len(done)}"
    )


def cmd_cats(state: AppState, args: list[str]) -> str:
    breakdown = task_api.category_breakdown(state.task_store.load_tasks())
    lines = ["Categories:"]
    for name, count in breakdown.items():
        lines.append(f"  {name}: {count}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add title | deadline | category | priority.")
registry.register("list", cmd_list, help_text="List tasks: /list [category].", aliases=["ls"])
registry.register("find", cmd_find, help_text="Search title/description: /find <text>.")
registry.register("done", cmd_done, help_text="Mark a task done: /done <id>.")
registry.register("undo", cmd_undo, help_text="Restore a done task to todo: /undo <id>.")
registry.register("status", cmd_status, help_text="Set status: /status <id> todo|doing|waiting|done.")
registry.register("sub", cmd_sub, help_text="Subtasks: /sub <id> <sub_id> | /sub <id> add <title>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.")
registry.register("stats", cmd_stats, help_text="Show streak and completion counters.")
registry.register("cats", cmd_cats, help_text="Show task counts per category.")
registry.register("show", cmd_show, help_text="Show task details: /show <id>.")
registry.register("edit", cmd_edit, help_text="Edit a field: /edit <id> title|deadline|description|category|priority <value>.")
registry.register("link", cmd_link, help_text="Attach a link: /link <id> <url> [title].")
registry.register("remind", cmd_remind, help_text="Reminder: /remind <id> <YYYY-MM-DDTHH:MM> [method] | /remind <id> off.")
registry.register("move", cmd_move, help_text="Reorder: /move <id> <position> (1 = top).")

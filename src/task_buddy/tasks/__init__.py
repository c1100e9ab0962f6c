"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, Priority, Subtask, ...)
- task_store.py: task list persisted as one JSON document
- task_api.py: lifecycle helpers used by connectors (create/complete/restore/...)
"""

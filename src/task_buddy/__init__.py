"""
Your Buddy: a personal task tracker with a daily completion streak.

Subpackages:
- core: ports (Clock, KeyValueBackend), AppState
- storage: SQLite key/value backend
- stats: streak/statistics engine
- tasks: task records and the task lifecycle API
- cli, connectors: console entrypoint and REPL
"""

__version__ = "0.1.0"

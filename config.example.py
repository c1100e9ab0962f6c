# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "BUDDY_APP_NAME": "App display name (default: Your Buddy).",
    "BUDDY_LOG_LEVEL": "Console logging level (default: INFO).",
    "BUDDY_LOG_TO_FILE": "Write full logs to <data_dir>/buddy.log (true/false, default: true).",
    # Connectors
    "BUDDY_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Paths (gitignored)
    "BUDDY_DATA_DIR": "Local data directory (default: .local/buddy).",
    "BUDDY_DB_PATH": "SQLite key/value store path (default: <data_dir>/buddy.sqlite3).",
    # Storage keys
    "BUDDY_STATS_KEY": "Key of the statistics record (default: your_buddy_stats).",
    "BUDDY_TASKS_KEY": "Key of the task list record (default: your_buddy_tasks).",
}

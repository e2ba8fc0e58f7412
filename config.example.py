# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKDECK_APP_NAME": "App display name (default: taskdeck).",
    "TASKDECK_LOG_LEVEL": "Log file level (default: INFO). Console shows WARNING+ only.",
    # Paths (gitignored)
    "TASKDECK_DATA_DIR": "Local data directory (default: .local/taskdeck).",
    "TASKDECK_TASKS_PATH": "Task JSON document (default: <data_dir>/tasks.json).",
    # UI
    "TASKDECK_CONFIRM_DESTRUCTIVE": "Ask before /rm, /purge and /clear (true/false, default: true).",
    "TASKDECK_DEFAULT_FILTER": "Initial list filter: all|none|low|medium|high (default: all).",
}

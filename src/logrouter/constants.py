"""
Shared constants for log-type routing.
"""

DEFAULT_ROOT_FOLDER = "app-logs"
DEFAULT_FOLDER = "default"
DEFAULT_EXTENSION = "md"

# Placeholders: timestamp, level, message, exception, newline, name
DEFAULT_OUTPUT_TEMPLATE = "{timestamp} [{level}] {message}{newline}{exception}"

NO_LOG_DATA_MESSAGE = "No log data provided."

DEFAULT_MAX_WORKERS = 4
DEFAULT_MAX_EXCEPTION_DEPTH = 16

# Entry frame timestamps (UTC and local)
FRAME_TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S %z"

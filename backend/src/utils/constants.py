"""Shared constants for the repair intake backend."""

# Accepted repair priorities, in the order the form offers them.
PRIORITIES: tuple[str, ...] = ("Low", "Medium", "High")
DEFAULT_PRIORITY: str = "Low"

# Public URL prefix under which stored attachments are served.
UPLOADS_URL_PREFIX: str = "/uploads"

DEFAULT_PORT: int = 5000
DEFAULT_API_KEY: str = "TEST_API_KEY_123"
DEFAULT_DATA_DIR: str = "data"
SUBMISSIONS_FILENAME: str = "submissions.json"
UPLOADS_DIRNAME: str = "uploads"

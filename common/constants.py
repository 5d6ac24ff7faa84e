"""Project-wide constants (application namespace, key prefixes, defaults)."""

APP_ID: str = "flow"

FILE_KEY_PREFIX: str = "file:"
CLIENT_KEY_PREFIX: str = "client:"

SYSTEM_OWNER_NAME: str = "Admin"
UNKNOWN_OWNER_NAME: str = "Unknown"

DEFAULT_PAGE: int = 1
DEFAULT_PAGE_LIMIT: int = 8

KANBAN_KEY: str = "kanban"

RECOVERY_CODE_LENGTH: int = 8

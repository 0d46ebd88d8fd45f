"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE_OFFSET_MINUTES = 330
DEFAULT_PANEL_INDEX_PATH = "panel/index"
DEFAULT_PANEL_CONFIG_TTL_SECONDS = 300
DEFAULT_SESSION_LIST_LIMIT = 5

SESSION_CODE_PREFIX_LENGTH = 8
SESSION_CODE_SUFFIX_BYTES = 3

ISO_SUNDAY = 7

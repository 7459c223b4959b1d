"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_SHIFT_CAPACITY = 5
DEFAULT_CONFLICT_SCAN_DAYS = 7
DEFAULT_HISTORY_LIMIT = 100
TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"

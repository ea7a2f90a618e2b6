"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

DEFAULT_LOCATION = "General Ashram"
DEFAULT_POINT = "General Duty"
UNASSIGNED_POINT_LABEL = "GENERAL / UNASSIGNED"

OPEN_DURATION_LABEL = "-"

CUSTOM_SEWADAR_PREFIX = "ADDED-"

# Shift cutovers seen in historical reports. The newer one is the default.
DEFAULT_SHIFT_CUTOVER = "19:00"
LEGACY_SHIFT_CUTOVER = "17:00"

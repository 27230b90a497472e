"""
Configuration for the timetable grid and the clash/schedule engine.

Grid layout constants describe the published timetable spreadsheet:
one sheet per weekday, batch colour legend in the first rows,
a "Room" row carrying the lecture time per column, and an optional
"Lab" row further down carrying lab times.
"""
from __future__ import annotations

from dataclasses import dataclass, field

# ──────────────────────────────────────────────────────────────────
#  Grid layout
# ──────────────────────────────────────────────────────────────────

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

# Rows scanned for the batch colour legend
LEGEND_ROWS = 4
# First row holding course cells
DATA_START_ROW = 5
# Rows searched for the "Room" (lecture time) row
TIME_ROW_SEARCH_LIMIT = 10
# Time row used when no "Room" row is found
FALLBACK_TIME_ROW = 4
# Sheets with fewer rows than this carry no sessions
MIN_SHEET_ROWS = 6

TIME_ROW_MARKER = "room"
LAB_ROW_MARKER = "lab"
BATCH_MARKER = "BS"
CANCELLED_MARKER = "cancelled"

# Background colour signature of an unfilled cell (white)
NO_FILL_COLOR = "1.001.001.00"

# ──────────────────────────────────────────────────────────────────
#  Time handling
# ──────────────────────────────────────────────────────────────────

UNKNOWN_TIME_SLOT = "Unknown"
UNKNOWN_MINUTES = 9999
# Length of one teaching period when only a start time is given
DEFAULT_PERIOD_MINUTES = 50
UNKNOWN_RANK = 999


@dataclass(frozen=True)
class ClockConvention:
    """
    How to read an hour written without AM/PM.

    Hours in ``pm_hours`` get 12 added; all others are taken as written.
    """

    pm_hours: frozenset = field(default_factory=frozenset)

    def to_24h(self, hour: int) -> int:
        if hour in self.pm_hours:
            return hour + 12
        return hour


# Classes run from 8:00 to about 7:00 PM: 8-11 morning, 12 noon, 1-7 afternoon.
UNIVERSITY_CLOCK = ClockConvention(pm_hours=frozenset(range(1, 8)))

# Plain 24-hour reading, for sheets that never use AM/PM-less afternoon hours
TWENTY_FOUR_HOUR_CLOCK = ClockConvention()

# ──────────────────────────────────────────────────────────────────
#  Caching and export
# ──────────────────────────────────────────────────────────────────

DOCUMENT_CACHE_TTL = 30 * 60
CATALOG_CACHE_TTL = 10 * 60

DEFAULT_TIMEZONE = "Asia/Karachi"

"""
Time-slot parsing and small text helpers for timetable cells.

Time slots in the grid are free text such as "8:00-8:50", "11:00 - 1:30",
"2:30 PM - 4:00 PM" or just "9:00". They are turned into minutes since
midnight; anything unreadable becomes the UNKNOWN_MINUTES sentinel.
"""
from __future__ import annotations

import re
from typing import Tuple

from .config import (
    BATCH_MARKER,
    DEFAULT_PERIOD_MINUTES,
    UNIVERSITY_CLOCK,
    UNKNOWN_MINUTES,
    UNKNOWN_TIME_SLOT,
    ClockConvention,
)

_TIME_TOKEN_RE = re.compile(r"(\d{1,2}):(\d{2})")
# "am"/"pm" as a word of its own, or glued to the digits ("10:30AM")
_MERIDIEM_RE = re.compile(r"(?<![a-z])(am|pm)(?![a-z])", re.I)
# A time or a time range standing on its own inside a cell
_EMBEDDED_TIME_RE = re.compile(r"\b(\d{1,2}:\d{2}(?:\s*[-–]\s*\d{1,2}:\d{2})?)\b")

UNKNOWN_RANGE = (UNKNOWN_MINUTES, UNKNOWN_MINUTES)


def _hour_24(hour: int, meridiem: str | None, clock: ClockConvention) -> int:
    if meridiem:
        meridiem = meridiem.upper()
        if meridiem == "PM" and hour != 12:
            return hour + 12
        if meridiem == "AM" and hour == 12:
            return 0
        return hour
    return clock.to_24h(hour)


def parse_time_slot(
    text: str | None, clock: ClockConvention = UNIVERSITY_CLOCK
) -> Tuple[int, int]:
    """
    Parse a time slot into (start, end) minutes since midnight.

    With AM/PM markers, the n-th time uses the n-th marker (or the last one
    when there are fewer markers than times). Without markers, ``clock``
    decides which hours are afternoon. A single time lasts one period.
    """
    if not text or text.strip().lower() == UNKNOWN_TIME_SLOT.lower():
        return UNKNOWN_RANGE

    tokens = _TIME_TOKEN_RE.findall(text)
    if not tokens:
        return UNKNOWN_RANGE
    markers = _MERIDIEM_RE.findall(text)

    def to_minutes(idx: int) -> int:
        hour, minute = int(tokens[idx][0]), int(tokens[idx][1])
        meridiem = markers[min(idx, len(markers) - 1)] if markers else None
        return _hour_24(hour, meridiem, clock) * 60 + minute

    start = to_minutes(0)
    end = to_minutes(1) if len(tokens) > 1 else start + DEFAULT_PERIOD_MINUTES
    if end < start:
        return UNKNOWN_RANGE
    return start, end


def do_time_slots_overlap(
    slot1: str | None, slot2: str | None, clock: ClockConvention = UNIVERSITY_CLOCK
) -> bool:
    """Half-open overlap test; unknown times never overlap anything."""
    start1, end1 = parse_time_slot(slot1, clock)
    start2, end2 = parse_time_slot(slot2, clock)
    if start1 == UNKNOWN_MINUTES or start2 == UNKNOWN_MINUTES:
        return False
    return not (end1 <= start2 or end2 <= start1)


def parse_embedded_time(entry: str | None) -> Tuple[str, str, bool]:
    """
    Split a cell like "Func Eng (SE) 09:00-10:45" into
    ("Func Eng (SE)", "09:00-10:45", True).

    Cells without their own time come back as (entry, "Unknown", False).
    """
    if not entry:
        return entry or "", UNKNOWN_TIME_SLOT, False

    m = _EMBEDDED_TIME_RE.search(entry)
    if not m:
        return entry, UNKNOWN_TIME_SLOT, False

    cleaned = entry[: m.start()] + " " + entry[m.end():]
    cleaned = re.sub(r"\s+", " ", cleaned).strip(" -–,")
    return cleaned, m.group(1), True


def format_minutes_to_time(minutes: int) -> str:
    """Render minutes since midnight as e.g. '1:30 PM'."""
    if minutes == UNKNOWN_MINUTES:
        return UNKNOWN_TIME_SLOT
    hours, mins = divmod(minutes, 60)
    period = "PM" if hours >= 12 else "AM"
    display_hour = hours - 12 if hours > 12 else (12 if hours == 0 else hours)
    return f"{display_hour}:{mins:02d} {period}"


# ──────────────────────────────────────────────────────────────────
#  Batch / room text
# ──────────────────────────────────────────────────────────────────

def extract_department_from_batch(batch: str | None) -> str:
    """'BS-CS-1' → 'CS', 'BS SE (2023)' → 'SE'."""
    if not batch:
        return ""
    if "-" in batch:
        parts = batch.split("-")
        if len(parts) >= 2:
            return parts[1].strip()
    for token in re.findall(r"\b[A-Z]{2,4}\b", batch):
        if token != BATCH_MARKER:
            return token
    return ""


def extract_year_from_batch(batch: str) -> str:
    m = re.search(r"(20\d{2})", batch or "")
    return m.group(1) if m else batch


_ROOM_PREFIXES = ["room", "room no", "room number", "location", "venue"]


def clean_room_data(room: str | None) -> str:
    """Strip labels such as 'Room No.' from the room column."""
    if not room:
        return UNKNOWN_TIME_SLOT

    cleaned = room.strip()
    for prefix in _ROOM_PREFIXES:
        if cleaned.lower().startswith(prefix):
            cleaned = cleaned[len(prefix):].strip()

    lowered = cleaned.lower()
    if lowered.startswith("no.") or lowered.startswith("no "):
        cleaned = cleaned[3:].strip()

    cleaned = re.sub(r"^[.,;:\s]+|[.,;:\s]+$", "", cleaned)
    return cleaned or UNKNOWN_TIME_SLOT

"""Tests for time_parser.py – time slots, embedded times and cell text helpers."""
import pytest

from timetable_clashes.config import TWENTY_FOUR_HOUR_CLOCK, UNKNOWN_MINUTES
from timetable_clashes.time_parser import (
    UNKNOWN_RANGE,
    clean_room_data,
    do_time_slots_overlap,
    extract_department_from_batch,
    extract_year_from_batch,
    format_minutes_to_time,
    parse_embedded_time,
    parse_time_slot,
)


# ── Time slots ─────────────────────────────────────────────────

class TestParseTimeSlot:
    def test_morning_range(self):
        assert parse_time_slot("8:00-8:50") == (480, 530)

    def test_afternoon_hours_without_marker(self):
        assert parse_time_slot("1:00-2:00") == (780, 840)

    def test_noon_stays_noon(self):
        assert parse_time_slot("12:00-12:50") == (720, 770)

    def test_range_across_noon(self):
        assert parse_time_slot("11:00 - 1:30") == (660, 810)

    def test_explicit_pm(self):
        assert parse_time_slot("2:30 PM - 4:00 PM") == (870, 960)

    def test_markers_glued_to_digits(self):
        assert parse_time_slot("10:30AM-12:15PM") == (630, 735)

    def test_single_marker_applies_to_both_times(self):
        assert parse_time_slot("3:00-4:15 pm") == (900, 975)

    def test_midnight(self):
        assert parse_time_slot("12:00 AM") == (0, 50)

    def test_single_time_lasts_one_period(self):
        assert parse_time_slot("9:00") == (540, 590)

    @pytest.mark.parametrize("text", [None, "", "unknown", "Unknown", "TBA", "Room 4"])
    def test_unreadable(self, text):
        assert parse_time_slot(text) == UNKNOWN_RANGE

    def test_backwards_range_is_unknown(self):
        assert parse_time_slot("5:00-4:00") == (UNKNOWN_MINUTES, UNKNOWN_MINUTES)

    def test_twenty_four_hour_clock(self):
        assert parse_time_slot("1:00-2:00", TWENTY_FOUR_HOUR_CLOCK) == (60, 120)
        assert parse_time_slot("14:00-15:30", TWENTY_FOUR_HOUR_CLOCK) == (840, 930)


class TestTimeSlotsOverlap:
    def test_overlapping(self):
        assert do_time_slots_overlap("09:00-10:45", "10:00-11:00")

    def test_touching_boundary(self):
        assert not do_time_slots_overlap("09:00-09:50", "09:50-10:40")

    def test_contained(self):
        assert do_time_slots_overlap("8:00-11:00", "9:00-9:50")

    def test_symmetric(self):
        pairs = [
            ("09:00-10:45", "10:00-11:00"),
            ("09:00-09:50", "09:50-10:40"),
            ("1:00-2:00", "1:30-2:30"),
            ("Unknown", "9:00-9:50"),
        ]
        for a, b in pairs:
            assert do_time_slots_overlap(a, b) == do_time_slots_overlap(b, a)

    def test_unknown_never_overlaps(self):
        assert not do_time_slots_overlap("Unknown", "9:00-9:50")
        assert not do_time_slots_overlap("TBA", "TBA")


class TestParseEmbeddedTime:
    def test_range_at_end(self):
        assert parse_embedded_time("Func Eng (SE) 09:00-10:45") == (
            "Func Eng (SE)", "09:00-10:45", True,
        )

    def test_separator_stripped(self):
        cleaned, slot, found = parse_embedded_time("OOP (CS-A) - 3:00 - 4:15")
        assert cleaned == "OOP (CS-A)"
        assert slot == "3:00 - 4:15"
        assert found

    def test_single_time(self):
        assert parse_embedded_time("Seminar 2:00") == ("Seminar", "2:00", True)

    def test_no_time(self):
        assert parse_embedded_time("Data Structures (CS-A)") == (
            "Data Structures (CS-A)", "Unknown", False,
        )

    def test_empty(self):
        assert parse_embedded_time("") == ("", "Unknown", False)
        assert parse_embedded_time(None) == ("", "Unknown", False)


class TestFormatMinutes:
    def test_values(self):
        assert format_minutes_to_time(480) == "8:00 AM"
        assert format_minutes_to_time(720) == "12:00 PM"
        assert format_minutes_to_time(780) == "1:00 PM"
        assert format_minutes_to_time(0) == "12:00 AM"

    def test_unknown(self):
        assert format_minutes_to_time(UNKNOWN_MINUTES) == "Unknown"


# ── Batch / room text ──────────────────────────────────────────

class TestBatchText:
    def test_department_from_dashed_batch(self):
        assert extract_department_from_batch("BS-CS-2023") == "CS"
        assert extract_department_from_batch("BS-SE-1") == "SE"

    def test_department_from_spaced_batch(self):
        assert extract_department_from_batch("BS SE (2023)") == "SE"

    def test_department_missing(self):
        assert extract_department_from_batch("") == ""
        assert extract_department_from_batch(None) == ""

    def test_year(self):
        assert extract_year_from_batch("BS-CS-2023") == "2023"
        assert extract_year_from_batch("BS-CS") == "BS-CS"


class TestCleanRoomData:
    def test_room_no_prefix(self):
        assert clean_room_data("Room No. 101") == "101"

    def test_venue_prefix(self):
        assert clean_room_data("Venue: C-12") == "C-12"

    def test_plain(self):
        assert clean_room_data("R-102") == "R-102"
        assert clean_room_data("CS Lab 1") == "CS Lab 1"

    def test_empty(self):
        assert clean_room_data(None) == "Unknown"
        assert clean_room_data("Room") == "Unknown"

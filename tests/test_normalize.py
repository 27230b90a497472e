"""Tests for normalize.py – weekly session allotment per course."""
from timetable_clashes.models import SessionKind
from timetable_clashes.normalize import filter_valid_sessions

LAB = SessionKind.LAB


class TestFilterValidSessions:
    def test_two_lectures_kept(self, make_session):
        sessions = [
            make_session("DS", "A", "Monday", "9:00-9:50"),
            make_session("DS", "A", "Tuesday", "9:00-9:50"),
            make_session("DS", "A", "Wednesday", "9:00-9:50"),
        ]
        assert filter_valid_sessions(sessions) == sessions[:2]

    def test_same_day_repeat_dropped(self, make_session):
        sessions = [
            make_session("DS", "A", "Monday", "9:00-9:50"),
            make_session("DS", "A", "Monday", "11:00-11:50"),
            make_session("DS", "A", "Thursday", "9:00-9:50"),
        ]
        assert filter_valid_sessions(sessions) == [sessions[0], sessions[2]]

    def test_lecture_course_keeps_one_lab(self, make_session):
        sessions = [
            make_session("DS", "A", "Monday", "9:00-9:50"),
            make_session("DS", "A", "Monday", "2:00-4:30", kind=LAB),
            make_session("DS", "A", "Wednesday", "9:00-9:50"),
            make_session("DS", "A", "Thursday", "2:00-4:30", kind=LAB),
        ]
        assert filter_valid_sessions(sessions) == sessions[:3]

    def test_lab_course_keeps_only_one_lab(self, make_session):
        sessions = [
            make_session("DS Lab (G-1)", "A", "Monday", "2:00-4:30", kind=LAB),
            make_session("DS Lab (G-1)", "A", "Wednesday", "2:00-4:30", kind=LAB),
            make_session("DS Lab (G-1)", "A", "Friday", "9:00-9:50"),
        ]
        assert filter_valid_sessions(sessions) == sessions[:1]

    def test_order_preserved_across_courses(self, make_session):
        sessions = [
            make_session("OOP", "A", "Monday", "8:00-8:50"),
            make_session("DS", "A", "Monday", "9:00-9:50"),
            make_session("OOP", "A", "Tuesday", "8:00-8:50"),
            make_session("OOP", "A", "Friday", "8:00-8:50"),
            make_session("DS", "A", "Tuesday", "9:00-9:50"),
        ]
        kept = filter_valid_sessions(sessions)
        assert kept == [sessions[0], sessions[1], sessions[2], sessions[4]]

    def test_idempotent(self, make_session):
        sessions = [
            make_session("DS", "A", "Monday", "9:00-9:50"),
            make_session("DS", "A", "Monday", "2:00-4:30", kind=LAB),
            make_session("DS", "A", "Monday", "11:00-11:50"),
            make_session("OOP", "B", "Tuesday", "9:00-9:50"),
            make_session("DS", "A", "Wednesday", "9:00-9:50"),
            make_session("DS", "A", "Friday", "9:00-9:50"),
            make_session("OOP Lab", "B", "Friday", "2:00-4:30", kind=LAB),
        ]
        once = filter_valid_sessions(sessions)
        assert filter_valid_sessions(once) == once

    def test_empty(self):
        assert filter_valid_sessions([]) == []

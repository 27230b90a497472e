"""
Clash detection between timetable sessions.
"""
from __future__ import annotations

from typing import List

from .models import Clash, TimetableSession
from .time_parser import do_time_slots_overlap


def sessions_overlap(a: TimetableSession, b: TimetableSession) -> bool:
    """Half-open time overlap, from the parsed minutes when both are known."""
    if a.has_known_time and b.has_known_time:
        return not (a.end_minutes <= b.start_minutes or b.end_minutes <= a.start_minutes)
    return do_time_slots_overlap(a.time_slot, b.time_slot)


def detect_clashes(sessions: List[TimetableSession]) -> List[Clash]:
    """
    All same-day overlaps between sessions of different courses.

    Sections of one course never clash with each other. Each
    (course, course, day) triple is reported once, for the first
    overlapping pair found.
    """
    clashes: List[Clash] = []
    seen: set[tuple] = set()

    for i, s1 in enumerate(sessions):
        for s2 in sessions[i + 1:]:
            if s1.course_name == s2.course_name:
                continue
            if s1.day != s2.day:
                continue
            if not sessions_overlap(s1, s2):
                continue

            clash = Clash(
                course1=s1.course_name,
                section1=s1.section,
                course2=s2.course_name,
                section2=s2.section,
                day=s1.day,
                time_slot1=s1.time_slot,
                time_slot2=s2.time_slot,
            )
            if clash.key in seen:
                continue
            seen.add(clash.key)
            clashes.append(clash)

    return clashes


def format_clash(clash: Clash) -> str:
    return (
        f'"{clash.course1}" (Section {clash.section1}) clashes with '
        f'"{clash.course2}" (Section {clash.section2}) on {clash.day} '
        f"at {clash.time_slot1} / {clash.time_slot2}"
    )


def clash_message(clash: Clash) -> str:
    return f"{clash.course1} clashes with {clash.course2} on {clash.day} {clash.time_slot1}"

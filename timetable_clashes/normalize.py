"""
Trim extracted sessions to the weekly pattern of a course.

A course meets for two lectures and at most one lab per week; a lab
course (name containing "lab") meets once. Loose text matching can pick
up repeats, so extra sessions are dropped here.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from .config import LAB_ROW_MARKER
from .models import TimetableSession

MAX_LECTURES_PER_WEEK = 2
MAX_LABS_PER_WEEK = 1

_Indexed = Tuple[int, TimetableSession]


def _first_per_day(sessions: List[_Indexed]) -> List[_Indexed]:
    kept: List[_Indexed] = []
    days: set[str] = set()
    for idx, s in sessions:
        if s.day in days:
            continue
        days.add(s.day)
        kept.append((idx, s))
    return kept


def filter_valid_sessions(sessions: List[TimetableSession]) -> List[TimetableSession]:
    """Keep at most two lectures and one lab per course, one per day each; order is preserved."""
    by_course: Dict[str, List[_Indexed]] = {}
    for idx, s in enumerate(sessions):
        by_course.setdefault(s.course_name, []).append((idx, s))

    kept: set[int] = set()
    for course_name, indexed in by_course.items():
        labs = _first_per_day([(i, s) for i, s in indexed if s.is_lab])
        lectures = _first_per_day([(i, s) for i, s in indexed if not s.is_lab])

        keep = labs[:MAX_LABS_PER_WEEK]
        if LAB_ROW_MARKER not in course_name.lower():
            keep = lectures[:MAX_LECTURES_PER_WEEK] + keep
        kept.update(i for i, _ in keep)

    return [s for i, s in enumerate(sessions) if i in kept]

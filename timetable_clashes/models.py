"""
Records produced by the grid extractor and the schedule engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from .config import UNKNOWN_MINUTES


class SessionKind(str, Enum):
    LECTURE = "Lecture"
    LAB = "Lab"


@dataclass(frozen=True)
class Course:
    """One catalog entry: a section of a course offered to a batch."""

    id: str
    name: str
    department: str
    section: str
    batch: str
    color: str
    full_entry: str
    day: str


@dataclass(frozen=True)
class TimetableSession:
    """One weekly meeting of a course section."""

    id: str
    day: str
    time_slot: str
    room: str
    kind: SessionKind
    course_name: str
    section: str
    batch: str
    department: str
    rank: int
    color: str
    start_minutes: int
    end_minutes: int

    @property
    def has_known_time(self) -> bool:
        return self.start_minutes != UNKNOWN_MINUTES

    @property
    def is_lab(self) -> bool:
        return self.kind is SessionKind.LAB


@dataclass(frozen=True)
class Clash:
    """Two sessions of different courses overlapping on the same day."""

    course1: str
    section1: str
    course2: str
    section2: str
    day: str
    time_slot1: str
    time_slot2: str

    @property
    def key(self) -> tuple:
        # (A, B, Monday) and (B, A, Monday) are the same clash
        return tuple(sorted((self.course1, self.course2, self.day)))


@dataclass(frozen=True)
class ScheduleAssignment:
    """Outcome of the section search for a set of courses."""

    success: bool
    assignments: Dict[str, str] = field(default_factory=dict)
    sessions: List[TimetableSession] = field(default_factory=list)
    clashes: List[Clash] = field(default_factory=list)
    clash_count: int = 0
    gap_minutes: int = 0
    message: str = ""


@dataclass(frozen=True)
class Catalog:
    courses: List[Course]
    batches: List[str]
    departments: List[str]

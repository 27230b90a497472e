"""Shared fixtures: a small two-day timetable grid and a session factory."""
import pytest

from timetable_clashes.grid import GridCell, GridDocument, GridSheet
from timetable_clashes.models import SessionKind, TimetableSession
from timetable_clashes.time_parser import parse_time_slot

CS = "0.800.200.10"
SE = "0.100.500.90"


def _row(*cells):
    """Build a grid row from plain strings, None, or (text, colour) pairs."""
    row = []
    for c in cells:
        if isinstance(c, tuple):
            row.append(GridCell(text=c[0], color=c[1]))
        else:
            row.append(GridCell(text=c))
    return row


def _legend():
    return [
        _row("Timetable", ("BS-CS-2023", CS), ("BS-SE-2023", SE), ("BS-XX-2023", "1.001.001.00")),
        _row(),
        _row(),
        _row(),
    ]


def _monday() -> GridSheet:
    rows = _legend() + [
        _row("Room", "8:00-8:50", "9:00-9:50", "10:00-10:50", "11:00-11:50"),
        _row(
            "Room No. 101",
            ("Data Structures (CS-A)", CS),
            None,
            ("OOP (CS-B)", CS),
            ("Calculus (SE-A)", SE),
        ),
        _row(
            "R-102",
            ("OOP (CS-A)", CS),
            ("Data Structures (CS-B)", CS),
            None,
            ("Cancelled - Ethics (CS-A)", CS),
        ),
        _row("Lab", "2:00-4:30", "4:30-7:00"),
        _row(
            "CS Lab 1",
            ("Data Structures Lab (CS-A, G-1)", CS),
            ("Data Structures Lab (CS-B, G-1)", CS),
        ),
    ]
    return GridSheet(title="Monday", rows=rows)


def _tuesday() -> GridSheet:
    rows = _legend() + [
        _row("Room", "8:00-8:50", "9:00-9:50", "10:00-10:50", "11:00-11:50"),
        _row("R-101", ("OOP (CS-B)", CS), ("Data Structures (CS-A)", CS)),
        _row(
            "R-102",
            None,
            ("OOP (CS-A)", CS),
            ("Data Structures (CS-B)", CS),
            ("Compilers (CS-A) 3:00-4:15", CS),
        ),
    ]
    return GridSheet(title="Tuesday", rows=rows)


@pytest.fixture
def sample_document() -> GridDocument:
    notes = GridSheet(title="Notes", rows=[_row(("BS-EE-2023", "0.300.300.30"))])
    return GridDocument(sheets=[_monday(), _tuesday(), notes])


@pytest.fixture
def make_session():
    """Factory for sessions with a parsed time slot."""

    def _make(course, section, day, slot, kind=SessionKind.LECTURE, batch="BS-CS-2023"):
        start, end = parse_time_slot(slot)
        return TimetableSession(
            id=f"{day}_{course}_{section}_{slot}",
            day=day,
            time_slot=slot,
            room="R-1",
            kind=kind,
            course_name=course,
            section=section,
            batch=batch,
            department="CS",
            rank=0,
            color=CS,
            start_minutes=start,
            end_minutes=end,
        )

    return _make

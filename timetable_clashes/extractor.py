"""
Extract courses and weekly sessions from a colour-coded timetable grid.

Sheet layout (one sheet per weekday):
- Rows 0-3: header; cells naming a batch ("BS-CS-2023") are filled with
  the colour used for that batch's classes.
- A row whose first cell contains "Room": lecture time per column.
- Rows from 5 on: one room per row (first cell), class cells coloured
  by batch, e.g. "Data Structures (CS-A)".
- A row whose first cell is "Lab": lab time per column; every row from
  there down is a lab room.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .catalog import get_batches, get_departments
from .config import (
    BATCH_MARKER,
    CANCELLED_MARKER,
    DATA_START_ROW,
    FALLBACK_TIME_ROW,
    LAB_ROW_MARKER,
    LEGEND_ROWS,
    MIN_SHEET_ROWS,
    NO_FILL_COLOR,
    TIME_ROW_MARKER,
    TIME_ROW_SEARCH_LIMIT,
    UNIVERSITY_CLOCK,
    UNKNOWN_RANK,
    UNKNOWN_TIME_SLOT,
    WEEKDAYS,
    ClockConvention,
)
from .grid import GridCell, GridDocument, GridSheet
from .models import Catalog, Course, SessionKind, TimetableSession
from .sections import has_section_marker, split_section, tidy_course_name
from .time_parser import (
    clean_room_data,
    extract_department_from_batch,
    parse_embedded_time,
    parse_time_slot,
)

logger = logging.getLogger(__name__)

BatchColorMap = Dict[str, str]


# ──────────────────────────────────────────────────────────────────
#  Sheet layout
# ──────────────────────────────────────────────────────────────────

@dataclass
class SheetLayout:
    """Where a weekday sheet keeps its time rows."""

    time_row: Optional[int] = None
    lab_row: Optional[int] = None
    col_rank: Dict[int, int] = field(default_factory=dict)

    def is_lab_row(self, row_idx: int) -> bool:
        return self.lab_row is not None and row_idx >= self.lab_row

    def time_slot(self, sheet: GridSheet, row_idx: int, col_idx: int) -> str:
        """Default time of a cell, from the lab or lecture time row."""
        source = self.lab_row if self.is_lab_row(row_idx) else self.time_row
        if source is None:
            return UNKNOWN_TIME_SLOT
        return sheet.cell(source, col_idx).text or UNKNOWN_TIME_SLOT

    def rank(self, col_idx: int) -> int:
        return self.col_rank.get(col_idx, UNKNOWN_RANK)


def read_sheet_layout(sheet: GridSheet) -> SheetLayout:
    layout = SheetLayout()

    start_col = 0
    for i in range(min(TIME_ROW_SEARCH_LIMIT, len(sheet.rows))):
        if TIME_ROW_MARKER in sheet.first_text(i).lower():
            layout.time_row = i
            start_col = 1
            break
    if layout.time_row is None and len(sheet.rows) > FALLBACK_TIME_ROW:
        layout.time_row = FALLBACK_TIME_ROW

    # The last "Lab" row wins
    for i in range(len(sheet.rows)):
        if sheet.first_text(i).strip().lower() == LAB_ROW_MARKER:
            layout.lab_row = i

    if layout.time_row is not None:
        for col_idx, cell in enumerate(sheet.rows[layout.time_row]):
            if col_idx >= start_col and cell.text:
                layout.col_rank[col_idx] = len(layout.col_rank)

    return layout


def sort_sessions(sessions: Iterable[TimetableSession]) -> List[TimetableSession]:
    """Order sessions Monday to Friday, then by start time."""

    def key(s: TimetableSession):
        day = WEEKDAYS.index(s.day) if s.day in WEEKDAYS else len(WEEKDAYS)
        return day, s.start_minutes

    return sorted(sessions, key=key)


def _is_similar_session(a: TimetableSession, b: TimetableSession) -> bool:
    return (
        a.day == b.day
        and a.time_slot == b.time_slot
        and a.course_name.lower() == b.course_name.lower()
        and a.section == b.section
    )


def _append_unique(sessions: List[TimetableSession], session: TimetableSession) -> None:
    if not any(_is_similar_session(s, session) for s in sessions):
        sessions.append(session)


def parse_course_entry(entry: str, department: str) -> tuple[str, str]:
    """
    Read (course_name, section) from a cell such as "Calculus A 9:00-10:15".

    The section rules see the raw text; the embedded time is removed from
    the name afterwards.
    """
    name, section, _ = split_section(entry, department)
    name, _, _ = parse_embedded_time(name)
    return tidy_course_name(name), section


# ──────────────────────────────────────────────────────────────────
#  Extractor
# ──────────────────────────────────────────────────────────────────

class GridExtractor:
    """Reads courses and sessions out of one grid document."""

    def __init__(self, document: GridDocument, clock: ClockConvention = UNIVERSITY_CLOCK):
        self.document = document
        self.clock = clock
        self._batch_colors: Optional[BatchColorMap] = None

    # ── batch legend ────────────────────────────────────────────

    def batch_colors(self) -> BatchColorMap:
        """Colour signature → batch label, from the header rows of each sheet."""
        if self._batch_colors is None:
            colors: BatchColorMap = {}
            for sheet in self.document.weekday_sheets():
                for row_idx in range(min(LEGEND_ROWS, len(sheet.rows))):
                    for cell in sheet.rows[row_idx]:
                        if (
                            cell.text
                            and BATCH_MARKER in cell.text
                            and cell.color
                            and cell.color != NO_FILL_COLOR
                        ):
                            colors[cell.color] = cell.text.strip()
            logger.info("Batch colors extracted: %d colors found", len(colors))
            self._batch_colors = colors
        return self._batch_colors

    def color_for_batch(self, batch: str) -> Optional[str]:
        for color, label in self.batch_colors().items():
            if label == batch:
                return color
        return None

    # ── catalog pass ────────────────────────────────────────────

    def _parse_course_entry(self, entry: str, batch: str) -> tuple[str, str, str]:
        department = extract_department_from_batch(batch)
        name, section = parse_course_entry(entry, department)
        return name, department, section

    def extract_all_courses(self) -> List[Course]:
        """
        Every distinct (name, department, section, batch) in the grid.

        Cancelled courses are dropped; the result is sorted by name,
        department and section.
        """
        batch_colors = self.batch_colors()
        courses: List[Course] = []
        seen: set[str] = set()

        for sheet in self.document.weekday_sheets():
            for row in sheet.rows[DATA_START_ROW:]:
                for cell in row:
                    if not cell.color or cell.color not in batch_colors or not cell.text:
                        continue
                    batch = batch_colors[cell.color]
                    name, department, section = self._parse_course_entry(cell.text, batch)
                    key = f"{name}_{department}_{section}_{batch}"
                    if key in seen:
                        continue
                    seen.add(key)
                    courses.append(Course(
                        id=key,
                        name=name,
                        department=department,
                        section=section,
                        batch=batch,
                        color=cell.color,
                        full_entry=cell.text,
                        day=sheet.title,
                    ))

        courses = [c for c in courses if CANCELLED_MARKER not in c.name.lower()]
        courses.sort(key=lambda c: (c.name.casefold(), c.department.casefold(), c.section.casefold()))
        logger.info("Extracted %d courses", len(courses))
        return courses

    def build_catalog(self) -> Catalog:
        courses = self.extract_all_courses()
        return Catalog(
            courses=courses,
            batches=get_batches(courses),
            departments=get_departments(courses),
        )

    # ── session passes ──────────────────────────────────────────

    def _make_session(
        self,
        sheet: GridSheet,
        layout: SheetLayout,
        row_idx: int,
        col_idx: int,
        cell: GridCell,
        *,
        suffix: str,
        course_name: str,
        section: str,
        batch: str,
        department: str,
    ) -> TimetableSession:
        _, embedded_time, has_embedded = parse_embedded_time(cell.text)
        time_slot = embedded_time if has_embedded else layout.time_slot(sheet, row_idx, col_idx)
        is_lab = layout.is_lab_row(row_idx) or LAB_ROW_MARKER in course_name.lower()
        start, end = parse_time_slot(time_slot, self.clock)
        return TimetableSession(
            id=f"{sheet.title}_{col_idx}_{row_idx}_{suffix}",
            day=sheet.title,
            time_slot=time_slot,
            room=clean_room_data(sheet.first_text(row_idx)),
            kind=SessionKind.LAB if is_lab else SessionKind.LECTURE,
            course_name=course_name,
            section=section,
            batch=batch,
            department=department,
            rank=layout.rank(col_idx),
            color=cell.color or "",
            start_minutes=start,
            end_minutes=end,
        )

    def _timetable_sheets(self) -> Iterable[tuple[GridSheet, SheetLayout]]:
        for sheet in self.document.weekday_sheets():
            if len(sheet.rows) < MIN_SHEET_ROWS:
                continue
            yield sheet, read_sheet_layout(sheet)

    def matches_course(self, entry: str, course: Course, cell_color: Optional[str]) -> bool:
        """Whether a cell's text and colour belong to ``course``."""
        cleaned, _, _ = parse_embedded_time(entry)
        text = cleaned.lower()
        wanted = course.name.lower()
        derived, _ = parse_course_entry(entry, course.department)
        if wanted not in text and wanted not in derived.lower():
            return False

        # Lab cells never match a lecture course
        if LAB_ROW_MARKER not in wanted and LAB_ROW_MARKER in text:
            return False

        if not has_section_marker(entry, course.department, course.section):
            return False

        expected = self.color_for_batch(course.batch)
        if expected and cell_color != expected:
            return False
        return True

    def get_timetable_for_courses(self, courses: List[Course]) -> List[TimetableSession]:
        """Weekly sessions of the chosen course sections."""
        if not courses:
            return []

        sessions: List[TimetableSession] = []
        for sheet, layout in self._timetable_sheets():
            for row_idx in range(DATA_START_ROW, len(sheet.rows)):
                for col_idx, cell in enumerate(sheet.rows[row_idx]):
                    if not cell.text:
                        continue
                    for course in courses:
                        if not self.matches_course(cell.text, course, cell.color):
                            continue
                        _append_unique(sessions, self._make_session(
                            sheet, layout, row_idx, col_idx, cell,
                            suffix=course.id,
                            course_name=course.name,
                            section=course.section,
                            batch=course.batch,
                            department=course.department,
                        ))

        return sort_sessions(sessions)

    def get_all_sessions_for_batch(self, batch: str) -> List[TimetableSession]:
        """Sessions of every section of every course taught to ``batch``."""
        target_color = self.color_for_batch(batch)
        if not target_color:
            logger.error("No color found for batch: %s", batch)
            return []

        department = extract_department_from_batch(batch)
        sessions: List[TimetableSession] = []
        for sheet, layout in self._timetable_sheets():
            for row_idx in range(DATA_START_ROW, len(sheet.rows)):
                for col_idx, cell in enumerate(sheet.rows[row_idx]):
                    if cell.color != target_color or not cell.text:
                        continue
                    course_name, section = parse_course_entry(cell.text, department)
                    if not section:
                        continue
                    _append_unique(sessions, self._make_session(
                        sheet, layout, row_idx, col_idx, cell,
                        suffix=section,
                        course_name=course_name,
                        section=section,
                        batch=batch,
                        department=department,
                    ))

        return sort_sessions(sessions)

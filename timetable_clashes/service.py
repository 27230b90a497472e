"""
Entry points used by front ends: course listing, clash check, optimal schedule.

The grid document comes from a loader callable (e.g. a function reading
a saved Sheets export); the loaded document and the catalog are kept in
TTL caches so repeated calls do not re-read the source.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .cache import TTLCache
from .clashes import detect_clashes, format_clash
from .config import CATALOG_CACHE_TTL, DOCUMENT_CACHE_TTL, UNIVERSITY_CLOCK, ClockConvention
from .extractor import GridExtractor
from .grid import GridDocument
from .models import Catalog, Clash, Course, ScheduleAssignment, TimetableSession
from .normalize import filter_valid_sessions
from .search import available_sections, find_optimal_schedule

_DOCUMENT_KEY = "document"
_CATALOG_KEY = "catalog"


@dataclass
class ClashReport:
    sessions: List[TimetableSession]
    clashes: List[Clash]
    messages: List[str]

    @property
    def has_clashes(self) -> bool:
        return bool(self.clashes)


@dataclass
class OptimalScheduleReport:
    result: ScheduleAssignment
    messages: List[str] = field(default_factory=list)
    available_sections: Dict[str, List[str]] = field(default_factory=dict)


class TimetableService:
    def __init__(
        self,
        loader: Callable[[], GridDocument],
        document_cache: Optional[TTLCache] = None,
        catalog_cache: Optional[TTLCache] = None,
        clock: ClockConvention = UNIVERSITY_CLOCK,
    ):
        self.loader = loader
        self.document_cache = document_cache or TTLCache(DOCUMENT_CACHE_TTL)
        self.catalog_cache = catalog_cache or TTLCache(CATALOG_CACHE_TTL)
        self.clock = clock

    def document(self) -> GridDocument:
        return self.document_cache.get_or_load(_DOCUMENT_KEY, self.loader)

    def extractor(self) -> GridExtractor:
        return GridExtractor(self.document(), clock=self.clock)

    def catalog(self) -> Catalog:
        return self.catalog_cache.get_or_load(
            _CATALOG_KEY, lambda: self.extractor().build_catalog()
        )

    def check_clashes(self, courses: List[Course]) -> ClashReport:
        """Sessions of the chosen sections and the clashes between them."""
        if not courses:
            raise ValueError("No courses selected.")
        raw = self.extractor().get_timetable_for_courses(courses)
        sessions = filter_valid_sessions(raw)
        clashes = detect_clashes(sessions)
        return ClashReport(
            sessions=sessions,
            clashes=clashes,
            messages=[format_clash(c) for c in clashes],
        )

    def optimal_schedule(
        self,
        batch: str,
        course_names: List[str],
        excluded: Optional[Dict[str, List[str]]] = None,
    ) -> OptimalScheduleReport:
        """Best section assignment for ``course_names`` within ``batch``."""
        if not batch:
            raise ValueError("Batch is required.")
        if not course_names:
            raise ValueError("No courses selected.")

        all_sessions = self.extractor().get_all_sessions_for_batch(batch)
        if not all_sessions:
            raise ValueError(f"No sessions found for batch: {batch}")

        result = find_optimal_schedule(all_sessions, course_names, excluded or {})
        return OptimalScheduleReport(
            result=result,
            messages=[format_clash(c) for c in result.clashes],
            available_sections=available_sections(all_sessions, course_names),
        )

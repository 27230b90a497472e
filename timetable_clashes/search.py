"""
Search for the section assignment with the fewest clashes.

Backtracking over one section per course: every complete assignment is
scored by its clash count, then by the idle minutes between classes on
the same day. Once a clash-free assignment is known, partial
assignments that already clash are abandoned, since adding courses can
only add clashes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .clashes import detect_clashes
from .extractor import sort_sessions
from .models import Clash, ScheduleAssignment, TimetableSession
from .normalize import filter_valid_sessions

logger = logging.getLogger(__name__)

SectionMap = Dict[str, Dict[str, List[TimetableSession]]]


@dataclass
class Candidate:
    """A complete assignment and its score."""

    assignments: Dict[str, str]
    sessions: List[TimetableSession]
    clashes: List[Clash] = field(default_factory=list)
    gap_minutes: int = 0

    @property
    def clash_count(self) -> int:
        return len(self.clashes)


# ──────────────────────────────────────────────────────────────────
#  Scoring rules
# ──────────────────────────────────────────────────────────────────

def gap_score(sessions: List[TimetableSession]) -> int:
    """Idle minutes between consecutive classes on each day; unknown times are ignored."""
    by_day: Dict[str, List[TimetableSession]] = {}
    for s in sessions:
        if s.has_known_time:
            by_day.setdefault(s.day, []).append(s)

    total = 0
    for day_sessions in by_day.values():
        day_sessions.sort(key=lambda s: s.start_minutes)
        for current, following in zip(day_sessions, day_sessions[1:]):
            gap = following.start_minutes - current.end_minutes
            if gap > 0:
                total += gap
    return total


def is_better(candidate: Candidate, best: Optional[Candidate]) -> bool:
    """Fewer clashes wins; on equal clashes fewer gap minutes wins; ties keep ``best``."""
    if best is None:
        return True
    return (candidate.clash_count, candidate.gap_minutes) < (best.clash_count, best.gap_minutes)


def should_prune(
    best: Optional[Candidate], index: int, partial_sessions: List[TimetableSession]
) -> bool:
    """
    Whether to stop extending a partial assignment.

    ``index`` is the position of the course just assigned; only
    assignments covering two or more courses are checked, and only once
    a clash-free candidate exists.
    """
    if best is None or best.clash_count > 0 or index < 1:
        return False
    return bool(detect_clashes(filter_valid_sessions(partial_sessions)))


def score_assignment(
    assignments: Dict[str, str], sessions: List[TimetableSession]
) -> Candidate:
    normalized = sort_sessions(filter_valid_sessions(sessions))
    return Candidate(
        assignments=dict(assignments),
        sessions=normalized,
        clashes=detect_clashes(normalized),
        gap_minutes=gap_score(normalized),
    )


def format_gap(minutes: int) -> str:
    if minutes >= 60:
        hours, mins = divmod(minutes, 60)
        return f"{hours}h {mins}m" if mins else f"{hours}h"
    return f"{minutes} min"


# ──────────────────────────────────────────────────────────────────
#  Section options
# ──────────────────────────────────────────────────────────────────

def group_sessions_by_section(
    all_sessions: List[TimetableSession], course_names: List[str]
) -> SectionMap:
    """course name → section → sessions, sections in first-seen order."""
    wanted = set(course_names)
    grouped: SectionMap = {}
    for s in all_sessions:
        if s.course_name not in wanted:
            continue
        grouped.setdefault(s.course_name, {}).setdefault(s.section, []).append(s)
    return grouped


def available_sections(
    all_sessions: List[TimetableSession], course_names: List[str]
) -> Dict[str, List[str]]:
    """Sorted sections offered for each course name."""
    grouped = group_sessions_by_section(all_sessions, course_names)
    return {name: sorted(grouped.get(name, {})) for name in course_names}


# ──────────────────────────────────────────────────────────────────
#  Search
# ──────────────────────────────────────────────────────────────────

def find_optimal_schedule(
    all_sessions: List[TimetableSession],
    selected_course_names: List[str],
    excluded_assignments: Optional[Dict[str, List[str]]] = None,
) -> ScheduleAssignment:
    """
    Pick one section per selected course, minimising clashes then gaps.

    :param all_sessions: Sessions of every section (see
        ``GridExtractor.get_all_sessions_for_batch``).
    :param selected_course_names: Courses to schedule, searched in this order.
    :param excluded_assignments: Sections the caller rules out, per course.
    """
    excluded_assignments = excluded_assignments or {}
    course_names = list(dict.fromkeys(selected_course_names))
    section_map = group_sessions_by_section(all_sessions, course_names)

    options: List[tuple[str, List[str]]] = []
    for name in course_names:
        excluded = set(excluded_assignments.get(name, []))
        sections = [s for s in section_map.get(name, {}) if s not in excluded]
        if not sections:
            logger.info("No sections left for %r after exclusions", name)
            return ScheduleAssignment(
                success=False,
                message=(
                    f'No available sections for "{name}" after exclusions. '
                    "Please remove some exclusions."
                ),
            )
        options.append((name, sections))

    best: Optional[Candidate] = None
    assignments: Dict[str, str] = {}
    chosen: List[TimetableSession] = []
    leaves = 0

    def dfs(i: int) -> None:
        nonlocal best, leaves
        if i == len(options):
            leaves += 1
            candidate = score_assignment(assignments, chosen)
            if is_better(candidate, best):
                best = candidate
            return

        name, sections = options[i]
        for section in sections:
            added = section_map[name][section]
            assignments[name] = section
            chosen.extend(added)
            if not should_prune(best, i, chosen):
                dfs(i + 1)
            del chosen[len(chosen) - len(added):]
        del assignments[name]

    dfs(0)

    logger.info(
        "Scored %d assignments for %d courses; best has %d clashes, %d gap minutes",
        leaves, len(options), best.clash_count, best.gap_minutes,
    )

    if best.clash_count == 0:
        return ScheduleAssignment(
            success=True,
            assignments=best.assignments,
            sessions=best.sessions,
            clashes=[],
            clash_count=0,
            gap_minutes=best.gap_minutes,
            message=(
                "Found a clash-free schedule! "
                f"Total gap between classes: {format_gap(best.gap_minutes)}."
            ),
        )
    return ScheduleAssignment(
        success=False,
        assignments=best.assignments,
        sessions=best.sessions,
        clashes=best.clashes,
        clash_count=best.clash_count,
        gap_minutes=best.gap_minutes,
        message=(
            "Could not find a clash-free schedule. "
            f"Minimum clashes: {best.clash_count}. "
            "You may need to drop some courses or accept the clashes."
        ),
    )

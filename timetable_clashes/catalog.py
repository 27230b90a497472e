"""
Queries over the extracted course catalog.
"""
from __future__ import annotations

from typing import List

from .models import Course


def get_batches(courses: List[Course]) -> List[str]:
    return sorted({c.batch for c in courses})


def get_departments(courses: List[Course]) -> List[str]:
    return sorted({c.department for c in courses})


def search_courses(
    courses: List[Course],
    query: str = "",
    department: str = "",
    batch: str = "",
) -> List[Course]:
    """
    Filter the catalog by exact department/batch and a case-insensitive
    query matched against name, department and section.
    """
    filtered = courses
    if department:
        filtered = [c for c in filtered if c.department == department]
    if batch:
        filtered = [c for c in filtered if c.batch == batch]
    if query:
        q = query.lower()
        filtered = [
            c for c in filtered
            if q in c.name.lower() or q in c.department.lower() or q in c.section.lower()
        ]
    return filtered


def get_courses_for_batch(courses: List[Course], batch: str) -> List[Course]:
    return [c for c in courses if c.batch == batch]


def get_unique_course_names_for_batch(courses: List[Course], batch: str) -> List[str]:
    """Course names offered to a batch, without sections."""
    return sorted({c.name for c in courses if c.batch == batch})


def get_sections_for_course(courses: List[Course], batch: str, course_name: str) -> List[str]:
    return sorted({c.section for c in courses if c.batch == batch and c.name == course_name})


def find_courses_by_id(courses: List[Course], ids: List[str]) -> List[Course]:
    """Look up catalog entries by id, in the order given."""
    by_id = {c.id: c for c in courses}
    missing = [i for i in ids if i not in by_id]
    if missing:
        raise ValueError(f"Unknown course id(s): {', '.join(missing)}")
    return [by_id[i] for i in ids]

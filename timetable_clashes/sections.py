"""
Section-letter extraction rules for course cells.

A course cell reads like "Data Structures (CS-A)", "DS Lab (CS-B, G-2)",
"OOP-C" or "Calculus (B)". The rules below are tried in order and the
first one that matches decides the section; changing the order changes
how cells are read. The matched text is replaced by the rule's
replacement to give the course name.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

_DEPT = "{dept}"


@dataclass(frozen=True)
class SectionRule:
    name: str
    # Regex template; "{dept}" is replaced by the escaped department code.
    # Group 1 is the section letter.
    template: str
    # Expansion template for the matched text (may use group references)
    replacement: str = ""

    def compile(self, department: str) -> re.Pattern:
        return re.compile(self.template.replace(_DEPT, re.escape(department)))


SECTION_RULES: List[SectionRule] = [
    # "Data Structures (CS-A)"
    SectionRule("department_section", r"\(" + _DEPT + r"-([A-Z])\)"),
    # "DS Lab (CS-A, G-1)": lab group of a section; the group stays in the name
    SectionRule("group_lab", r"\(" + _DEPT + r"-([A-Z]),\s*(G-\d+)\)", r"(\2)"),
    # "OOP-C", "OOP-C (old)"
    SectionRule("dash_suffix", r"-([A-Z])\b"),
    # "Calculus (B)"
    SectionRule("parenthesised", r"\(([A-Z])\)"),
    # "Calculus B Room 4"
    SectionRule("lone_letter", r"\s([A-Z])\s", " "),
]


def tidy_course_name(name: str) -> str:
    """Drop empty parens, doubled spaces and stray dashes left by extraction."""
    name = re.sub(r"\(\s*\)", "", name)
    name = re.sub(r"\s+", " ", name)
    return name.strip(" -–")


def split_section(
    entry: str, department: str, rules: List[SectionRule] = SECTION_RULES
) -> Tuple[str, str, Optional[str]]:
    """
    Return (course_name, section, rule_name) for a cell's text.

    When no rule matches the section is '' and the name is the tidied entry.
    """
    for rule in rules:
        m = rule.compile(department).search(entry)
        if m:
            name = entry[: m.start()] + m.expand(rule.replacement) + entry[m.end():]
            return tidy_course_name(name), m.group(1), rule.name
    return tidy_course_name(entry), "", None


def section_markers(department: str, section: str) -> List[str]:
    """Substrings that show a cell belongs to ``section`` of a course."""
    markers = [
        f"-{section})",
        f"-{section} ",
        f"-{section},",
        f"({section})",
        f" {section})",
    ]
    if department:
        markers.insert(0, f"({department}-{section})")
    return markers


def has_section_marker(entry: str, department: str, section: str) -> bool:
    if not section:
        return True
    if entry.rstrip().endswith(f"-{section}"):
        return True
    return any(marker in entry for marker in section_markers(department, section))

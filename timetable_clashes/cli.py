"""
Command-line interface: list courses, check clashes, or find the best sections.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List

from . import __version__
from .catalog import find_courses_by_id, search_courses
from .clashes import format_clash
from .config import DEFAULT_TIMEZONE
from .export import export
from .grid import GridDocument, load_sheets_api_json
from .grid_html import load_grid_html
from .models import TimetableSession
from .search import format_gap
from .service import TimetableService


def _load_selected_ids(args) -> list[str]:
    ids = list(args.check or [])
    if args.selected_file:
        p = Path(args.selected_file)
        if not p.exists():
            raise ValueError(f"--selected-file not found: {p}")
        ids.extend(
            s
            for line in p.read_text(encoding="utf-8").splitlines()
            if (s := line.strip()) and not s.startswith("#")
        )
    return ids


def _parse_exclusions(values: List[str] | None) -> Dict[str, List[str]]:
    """Turn ["Data Structures=A,B"] into {"Data Structures": ["A", "B"]}."""
    excluded: Dict[str, List[str]] = {}
    for value in values or []:
        name, sep, sections = value.rpartition("=")
        if not sep or not name.strip():
            raise ValueError(f'Bad --exclude value {value!r}; expected "COURSE=A,B".')
        excluded.setdefault(name.strip(), []).extend(
            s.strip() for s in sections.split(",") if s.strip()
        )
    return excluded


def _grid_loader(args) -> Callable[[], GridDocument]:
    if args.grid_json:
        return lambda: load_sheets_api_json(args.grid_json)
    return lambda: load_grid_html(args.grid_html)


def _print_sessions(sessions: List[TimetableSession]) -> None:
    print(f"{'Day':<10} | {'Time':<14} | {'Type':<7} | {'Room':<10} | Course")
    print("-" * 72)
    for s in sessions:
        print(
            f"{s.day:<10} | {s.time_slot:<14} | {s.kind.value:<7} | "
            f"{s.room[:10]:<10} | {s.course_name} ({s.section})"
        )


def _export_sessions(args, sessions: List[TimetableSession]) -> None:
    if not args.output:
        return
    ext = "." + args.format
    out_path = Path(args.output) if Path(args.output).suffix else Path(args.output + ext)
    count = export(
        sessions,
        out_path,
        args.format,
        term_start=args.term_start,
        term_end=args.term_end,
        tz_name=args.timezone,
    )
    print(f"Exported {count} session(s) to {out_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timetable-clashes",
        description=(
            "Read a colour-coded timetable spreadsheet, list its courses, check the chosen\n"
            "sections for clashes, or find the section combination with the fewest clashes."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show progress logging (-vv for debug output).",
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--grid-json",
        metavar="PATH",
        help="Saved Google Sheets API response (spreadsheets.get with includeGridData).",
    )
    source.add_argument(
        "--grid-html",
        metavar="PATH",
        nargs="+",
        help="Sheets exported as web page: one HTML file per weekday, or the folder holding them.",
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--list-courses",
        action="store_true",
        help="List the course catalog (Id, Course, Section, Batch) then exit.",
    )
    mode.add_argument(
        "--check",
        metavar="COURSE_ID",
        nargs="*",
        help="Check the given course ids (from --list-courses) for clashes.",
    )
    mode.add_argument(
        "--optimal",
        metavar="COURSE",
        nargs="+",
        help="Find the best section for each named course within --batch.",
    )

    parser.add_argument("--batch", help="Batch label, e.g. BS-CS-2023 (filter for --list-courses, required for --optimal).")
    parser.add_argument("--department", help="(--list-courses) Department filter, e.g. CS.")
    parser.add_argument("--query", help="(--list-courses) Text to search in course name/section.")
    parser.add_argument(
        "--selected-file",
        metavar="PATH",
        help="(--check) File with one course id per line (lines starting with # are ignored).",
    )
    parser.add_argument(
        "--exclude",
        metavar="COURSE=A,B",
        action="append",
        help="(--optimal) Sections to leave out for a course. Repeatable.",
    )

    parser.add_argument("-o", "--output", help="Write the resulting sessions to this path (extension optional).")
    parser.add_argument(
        "-f",
        "--format",
        choices=["ics", "csv", "json"],
        default="ics",
        help="Export format. Default: ics",
    )
    parser.add_argument("--term-start", metavar="YYYY-MM-DD", help="(ics) First teaching day of the term.")
    parser.add_argument("--term-end", metavar="YYYY-MM-DD", help="(ics) Last teaching day of the term.")
    parser.add_argument(
        "--timezone",
        default=DEFAULT_TIMEZONE,
        help=f"(ics) Timezone of the timetable. Default: {DEFAULT_TIMEZONE}",
    )
    return parser


def _run(args) -> int:
    service = TimetableService(_grid_loader(args))

    if args.list_courses:
        catalog = service.catalog()
        courses = search_courses(
            catalog.courses,
            query=args.query or "",
            department=args.department or "",
            batch=args.batch or "",
        )
        print(f"{'Course':<36} | Sec | {'Batch':<14} | Id")
        print("-" * 80)
        for c in courses:
            print(f"{c.name[:36]:<36} | {c.section:<3} | {c.batch:<14} | {c.id}")
        print(f"\n{len(courses)} course(s); batches: {', '.join(catalog.batches)}")
        print("Use: --check <Id> [<Id> ...]  or  --optimal <Course> [...] --batch <Batch>")
        return 0

    if args.check is not None:
        ids = _load_selected_ids(args)
        if not ids:
            print("Error: --check needs course ids (or --selected-file).", file=sys.stderr)
            return 1
        courses = find_courses_by_id(service.catalog().courses, ids)
        report = service.check_clashes(courses)
        _print_sessions(report.sessions)
        if report.has_clashes:
            print(f"\n{len(report.clashes)} clash(es):")
            for message in report.messages:
                print(f"  - {message}")
        else:
            print("\nNo clashes.")
        _export_sessions(args, report.sessions)
        return 0

    if not args.batch:
        print("Error: --optimal requires --batch.", file=sys.stderr)
        return 1
    report = service.optimal_schedule(args.batch, args.optimal, _parse_exclusions(args.exclude))
    result = report.result
    print(result.message)
    for name, section in result.assignments.items():
        options = ", ".join(report.available_sections.get(name, []))
        print(f"  {name}: Section {section}  (offered: {options})")
    if result.sessions:
        print()
        _print_sessions(result.sessions)
        print(f"\nTotal gap: {format_gap(result.gap_minutes)}")
    for clash in result.clashes:
        print(f"  - {format_clash(clash)}")
    _export_sessions(args, result.sessions)
    return 0 if result.success else 2


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING if not args.verbose else (logging.INFO if args.verbose == 1 else logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return _run(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

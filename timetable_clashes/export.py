"""
Export timetable sessions to ICS, CSV, and JSON.
"""
from __future__ import annotations

import csv
import hashlib
import json
from dataclasses import asdict
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path
from typing import Dict, List

import icalendar
import pytz

from .config import DEFAULT_TIMEZONE, WEEKDAYS
from .models import TimetableSession


def _first_date_for_weekday(start: date, weekday_name: str) -> date:
    """First date on/after ``start`` falling on ``weekday_name`` (e.g. 'Tuesday')."""
    if weekday_name not in WEEKDAYS:
        return start
    offset = (WEEKDAYS.index(weekday_name) - start.weekday()) % 7
    return start + timedelta(days=offset)


def _minutes_to_time(minutes: int) -> time:
    hours, mins = divmod(minutes, 60)
    return time(hour=hours % 24, minute=mins)


def session_to_dict(session: TimetableSession) -> Dict:
    row = asdict(session)
    row["kind"] = session.kind.value
    return row


def export_ics(
    sessions: List[TimetableSession],
    out_path: str | Path,
    term_start: str,
    term_end: str,
    tz_name: str = DEFAULT_TIMEZONE,
) -> int:
    """
    Export sessions as weekly recurring events between term_start and term_end
    (YYYY-MM-DD). Sessions without a known time are skipped.

    Returns the number of events written.
    """
    if not term_start or not term_end:
        raise ValueError("ICS export needs --term-start and --term-end (YYYY-MM-DD).")
    start_date = date.fromisoformat(term_start)
    end_date = date.fromisoformat(term_end)
    if end_date < start_date:
        raise ValueError(f"Term end {term_end} is before term start {term_start}.")
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown timezone: {tz_name}") from None

    cal = icalendar.Calendar()
    cal.add("prodid", "-//Timetable Clashes//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", "Timetable")
    cal.add("x-wr-timezone", tz_name)

    count = 0
    for s in sessions:
        if not s.has_known_time:
            continue
        first_day = _first_date_for_weekday(start_date, s.day)
        if first_day > end_date:
            continue
        start = datetime.combine(first_day, _minutes_to_time(s.start_minutes))
        end = datetime.combine(first_day, _minutes_to_time(s.end_minutes))

        summary = f"{s.course_name} ({s.section})" if s.section else s.course_name
        if s.is_lab and "lab" not in s.course_name.lower():
            summary += " Lab"

        event = icalendar.Event()
        # Deterministic UID so re-imports update rather than duplicate
        uid_string = f"{s.course_name}-{s.section}-{s.day}-{s.time_slot}-{s.room}"
        uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()
        event.add("uid", f"{uid_hash}@timetable-clashes")

        event.add("summary", summary)
        event.add("description", f"Batch: {s.batch}\nSection: {s.section}\nType: {s.kind.value}")
        event.add("location", s.room)
        event.add("dtstart", tz.localize(start))
        event.add("dtend", tz.localize(end))
        event.add("dtstamp", datetime.now(timezone.utc))

        until_dt = datetime.combine(end_date, time(23, 59, 59)).replace(tzinfo=timezone.utc)
        event.add("rrule", {"freq": "weekly", "until": until_dt})

        cal.add_component(event)
        count += 1

    Path(out_path).write_text(cal.to_ical().decode("utf-8"), encoding="utf-8")
    return count


def export_csv(sessions: List[TimetableSession], out_path: str | Path) -> int:
    """Export sessions to CSV."""
    if not sessions:
        Path(out_path).write_text("", encoding="utf-8")
        return 0
    rows = [session_to_dict(s) for s in sessions]
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        w.writeheader()
        w.writerows(rows)
    return len(rows)


def export_json(sessions: List[TimetableSession], out_path: str | Path) -> int:
    """Export sessions to JSON."""
    Path(out_path).write_text(
        json.dumps([session_to_dict(s) for s in sessions], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return len(sessions)


def export(
    sessions: List[TimetableSession],
    out_path: str | Path,
    fmt: str,
    term_start: str | None = None,
    term_end: str | None = None,
    tz_name: str = DEFAULT_TIMEZONE,
) -> int:
    """Export to the given format: ics, csv, or json. Returns the number of records written."""
    fmt = fmt.lower()
    if fmt == "ics":
        return export_ics(sessions, out_path, term_start or "", term_end or "", tz_name)
    elif fmt == "csv":
        return export_csv(sessions, out_path)
    elif fmt == "json":
        return export_json(sessions, out_path)
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use ics, csv, or json.")

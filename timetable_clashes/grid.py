"""
In-memory grid document: weekday sheets of cells with text and background colour.

A grid document can be built from the Google Sheets API v4 payload
(``spreadsheets.get`` with ``includeGridData=true``) or from the HTML
export (see ``grid_html``).
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .config import WEEKDAYS


def color_signature(red: float, green: float, blue: float) -> str:
    """Encode three 0-1 colour channels as e.g. '0.800.200.10'."""
    return f"{red:.2f}{green:.2f}{blue:.2f}"


@dataclass(frozen=True)
class GridCell:
    text: Optional[str] = None
    color: Optional[str] = None


EMPTY_CELL = GridCell()


@dataclass
class GridSheet:
    title: str
    rows: List[List[GridCell]] = field(default_factory=list)

    def cell(self, row: int, col: int) -> GridCell:
        """Return the cell at (row, col), or an empty cell outside the grid."""
        if row < 0 or row >= len(self.rows):
            return EMPTY_CELL
        values = self.rows[row]
        if col < 0 or col >= len(values):
            return EMPTY_CELL
        return values[col]

    def first_text(self, row: int) -> str:
        """Text of the first cell in a row ('' when empty)."""
        return self.cell(row, 0).text or ""


@dataclass
class GridDocument:
    sheets: List[GridSheet] = field(default_factory=list)

    def weekday_sheets(self) -> Iterator[GridSheet]:
        """Yield timetable sheets (titled by weekday) in document order."""
        for sheet in self.sheets:
            if sheet.title in WEEKDAYS:
                yield sheet

    def sheet(self, title: str) -> GridSheet | None:
        for sheet in self.sheets:
            if sheet.title == title:
                return sheet
        return None


# ──────────────────────────────────────────────────────────────────
#  Google Sheets API payload
# ──────────────────────────────────────────────────────────────────

def _api_cell(value: Dict[str, Any] | None) -> GridCell:
    if not value:
        return EMPTY_CELL
    text = value.get("formattedValue") or None
    bg = (value.get("effectiveFormat") or {}).get("backgroundColor")
    color = None
    if bg:
        # The API omits channels that are 0
        color = color_signature(
            bg.get("red", 0), bg.get("green", 0), bg.get("blue", 0)
        )
    return GridCell(text=text, color=color)


def load_sheets_api_payload(payload: Dict[str, Any]) -> GridDocument:
    """
    Build a GridDocument from a decoded ``spreadsheets.get`` response.

    Only the first data range of each sheet is read.
    """
    sheets: List[GridSheet] = []
    for sheet in payload.get("sheets") or []:
        title = (sheet.get("properties") or {}).get("title", "")
        data = sheet.get("data") or []
        row_data = (data[0].get("rowData") if data else None) or []
        rows = [
            [_api_cell(v) for v in (row or {}).get("values") or []]
            for row in row_data
        ]
        sheets.append(GridSheet(title=title, rows=rows))
    return GridDocument(sheets=sheets)


def load_sheets_api_json(path: str | Path) -> GridDocument:
    """Read a saved ``spreadsheets.get`` JSON response from disk."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict) or "sheets" not in payload:
        raise ValueError(f"Not a Google Sheets API payload: {path}")
    return load_sheets_api_payload(payload)

"""
Load a timetable grid from the Google Sheets "Download → Web page" export.

Usage pattern:
- Open the published timetable spreadsheet, File → Download → Web page (.html)
- Unzip: one HTML file per sheet (Monday.html, Tuesday.html, ...)
- Point ``load_grid_html`` at the directory or at the individual files

The export structure:
- <table class="waffle"> with a header row of column letters (<th>) and
  one <th> row header per row, followed by the <td> data cells.
- Cell colours come from class rules in a <style> block, e.g.
      .ritz .waffle .s3{background-color:#cfe2f3;...}
  or from an inline style attribute.
- Merged cells use rowspan/colspan; only the top-left cell carries the value.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from bs4 import BeautifulSoup, Tag  # type: ignore[import]

from .grid import EMPTY_CELL, GridCell, GridDocument, GridSheet, color_signature


# ──────────────────────────────────────────────────────────────────
#  Colour helpers
# ──────────────────────────────────────────────────────────────────

_BG_RE = re.compile(r"background(?:-color)?\s*:\s*([^;}]+)", re.I)
_CLASS_RULE_RE = re.compile(r"\.([A-Za-z][\w-]*)\s*\{([^}]*)\}")


def _parse_css_color(value: str) -> Optional[str]:
    """Turn '#cfe2f3', '#fff' or 'rgb(207, 226, 243)' into a colour signature."""
    value = value.strip().lower()
    m = re.match(r"^#([0-9a-f]{6})\b", value)
    if m:
        hexval = m.group(1)
        channels = [int(hexval[i:i + 2], 16) for i in (0, 2, 4)]
    else:
        m = re.match(r"^#([0-9a-f]{3})\b", value)
        if m:
            channels = [int(ch * 2, 16) for ch in m.group(1)]
        else:
            m = re.match(r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})", value)
            if not m:
                return None
            channels = [int(g) for g in m.groups()]
    r, g, b = (min(c, 255) / 255 for c in channels)
    return color_signature(r, g, b)


def _style_background(style: str) -> Optional[str]:
    m = _BG_RE.search(style or "")
    if not m:
        return None
    return _parse_css_color(m.group(1))


def _class_colors(soup: BeautifulSoup) -> Dict[str, str]:
    """Map CSS class name -> colour signature from <style> blocks."""
    colors: Dict[str, str] = {}
    for style in soup.find_all("style"):
        css = style.get_text() or ""
        for m in _CLASS_RULE_RE.finditer(css):
            color = _style_background(m.group(2))
            if color:
                colors[m.group(1)] = color
    return colors


def _cell_color(td: Tag, class_colors: Dict[str, str]) -> Optional[str]:
    inline = _style_background(td.get("style", ""))
    if inline:
        return inline
    color = None
    for cls in td.get("class") or []:
        # Later classes win, as in CSS with equal specificity
        color = class_colors.get(cls, color)
    return color


def _cell_text(td: Tag) -> Optional[str]:
    text = td.get_text(separator="\n", strip=True)
    lines = [l.strip() for l in text.split("\n") if l.strip()]
    text = " ".join(lines).replace("\xa0", " ").strip()
    return text or None


# ──────────────────────────────────────────────────────────────────
#  Table → grid
# ──────────────────────────────────────────────────────────────────

def _find_grid_table(soup: BeautifulSoup) -> Optional[Tag]:
    table = soup.find("table", class_="waffle")
    if table:
        return table
    return soup.find("table")


def _is_skipped_cell(td: Tag) -> bool:
    classes = " ".join(td.get("class") or [])
    return "freezebar" in classes


def _span(td: Tag, attr: str) -> int:
    try:
        return max(int(td.get(attr, 1)), 1)
    except (TypeError, ValueError):
        return 1


def _table_rows(table: Tag, class_colors: Dict[str, str]) -> List[List[GridCell]]:
    """
    Lay out <td> cells on a row/column grid.

    Positions covered by a rowspan/colspan from an earlier cell are
    filled with empty cells so column indices match the spreadsheet.
    """
    rows: List[List[GridCell]] = []
    # (row_idx, col_idx) positions occupied by spans from earlier cells
    occupied: set[tuple[int, int]] = set()

    row_idx = 0
    for tr in table.find_all("tr"):
        cells = [td for td in tr.find_all("td") if not _is_skipped_cell(td)]
        if not cells:
            continue  # header row of column letters

        row: Dict[int, GridCell] = {}
        col = 0
        for td in cells:
            while (row_idx, col) in occupied:
                row[col] = EMPTY_CELL
                col += 1

            row[col] = GridCell(text=_cell_text(td), color=_cell_color(td, class_colors))
            rowspan = _span(td, "rowspan")
            colspan = _span(td, "colspan")
            for dr in range(rowspan):
                for dc in range(colspan):
                    if dr or dc:
                        occupied.add((row_idx + dr, col + dc))
            col += 1

        # Spans trailing at the end of the row
        width = max(row) + 1 if row else 0
        for r, c in occupied:
            if r == row_idx and c >= width:
                width = c + 1
        rows.append([row.get(c, EMPTY_CELL) for c in range(width)])
        row_idx += 1

    return rows


# ──────────────────────────────────────────────────────────────────
#  Public API
# ──────────────────────────────────────────────────────────────────

def parse_sheet_html(html: str, title: str) -> GridSheet:
    """Parse one exported sheet into a GridSheet titled ``title``."""
    soup = BeautifulSoup(html, "html.parser")
    table = _find_grid_table(soup)
    if table is None:
        raise ValueError(f"Could not find a grid table in sheet '{title}'.")
    return GridSheet(title=title, rows=_table_rows(table, _class_colors(soup)))


def _expand_paths(paths: Iterable[str | Path]) -> List[Path]:
    files: List[Path] = []
    for p in paths:
        p = Path(p)
        if p.is_dir():
            files.extend(sorted(p.glob("*.html")))
        else:
            files.append(p)
    return files


def load_grid_html(paths: Iterable[str | Path]) -> GridDocument:
    """
    Load exported sheets into a GridDocument.

    Each file is one sheet, titled by its file name without extension;
    directories contribute every ``*.html`` file they contain.
    """
    sheets: List[GridSheet] = []
    for path in _expand_paths(paths):
        if not path.exists():
            raise ValueError(f"Grid file not found: {path}")
        html = path.read_text(encoding="utf-8", errors="ignore")
        sheets.append(parse_sheet_html(html, path.stem))
    if not sheets:
        raise ValueError("No HTML sheets found to load.")
    return GridDocument(sheets=sheets)

"""Tests for grid.py – grid document model and the Sheets API payload loader."""
import json

import pytest

from timetable_clashes.grid import (
    EMPTY_CELL,
    GridCell,
    GridSheet,
    color_signature,
    load_sheets_api_json,
    load_sheets_api_payload,
)


def _api_value(text=None, red=None, green=None, blue=None):
    value = {}
    if text is not None:
        value["formattedValue"] = text
    bg = {k: v for k, v in (("red", red), ("green", green), ("blue", blue)) if v is not None}
    if bg:
        value["effectiveFormat"] = {"backgroundColor": bg}
    return value


def _payload():
    return {
        "spreadsheetId": "abc",
        "sheets": [
            {
                "properties": {"title": "Monday"},
                "data": [{
                    "rowData": [
                        {"values": [
                            _api_value("Timetable"),
                            _api_value("BS-CS-2023", 0.8, 0.2, 0.1),
                        ]},
                        {},
                        {"values": [_api_value("Room"), _api_value("8:00-8:50", 1, 1, 1)]},
                    ]
                }],
            },
            {"properties": {"title": "Notes"}},
        ],
    }


class TestColorSignature:
    def test_two_decimals(self):
        assert color_signature(0.8, 0.2, 0.1) == "0.800.200.10"
        assert color_signature(1, 1, 1) == "1.001.001.00"

    def test_rounding(self):
        assert color_signature(0.8117647, 0.8862745, 0.9529412) == "0.810.890.95"


class TestGridSheet:
    def test_cell_out_of_range(self):
        sheet = GridSheet(title="Monday", rows=[[GridCell(text="Room")]])
        assert sheet.cell(0, 0).text == "Room"
        assert sheet.cell(0, 5) is EMPTY_CELL
        assert sheet.cell(3, 0) is EMPTY_CELL
        assert sheet.cell(-1, 0) is EMPTY_CELL

    def test_first_text(self):
        sheet = GridSheet(title="Monday", rows=[[GridCell()], [GridCell(text="Lab")]])
        assert sheet.first_text(0) == ""
        assert sheet.first_text(1) == "Lab"
        assert sheet.first_text(9) == ""


class TestLoadSheetsApiPayload:
    def test_sheets_and_titles(self):
        doc = load_sheets_api_payload(_payload())
        assert [s.title for s in doc.sheets] == ["Monday", "Notes"]
        assert [s.title for s in doc.weekday_sheets()] == ["Monday"]

    def test_cells(self):
        monday = load_sheets_api_payload(_payload()).sheet("Monday")
        assert monday.cell(0, 0) == GridCell(text="Timetable", color=None)
        assert monday.cell(0, 1) == GridCell(text="BS-CS-2023", color="0.800.200.10")
        assert monday.rows[1] == []
        assert monday.cell(2, 1).color == "1.001.001.00"

    def test_missing_channels_are_zero(self):
        payload = {"sheets": [{
            "properties": {"title": "Friday"},
            "data": [{"rowData": [{"values": [_api_value("BS-SE-2023", red=1)]}]}],
        }]}
        friday = load_sheets_api_payload(payload).sheet("Friday")
        assert friday.cell(0, 0).color == "1.000.000.00"

    def test_sheet_without_data(self):
        notes = load_sheets_api_payload(_payload()).sheet("Notes")
        assert notes.rows == []

    def test_unknown_sheet(self):
        assert load_sheets_api_payload(_payload()).sheet("Saturday") is None


class TestLoadSheetsApiJson:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "grid.json"
        path.write_text(json.dumps(_payload()), encoding="utf-8")
        doc = load_sheets_api_json(path)
        assert doc.sheet("Monday").cell(0, 1).text == "BS-CS-2023"

    def test_rejects_other_json(self, tmp_path):
        path = tmp_path / "grid.json"
        path.write_text(json.dumps({"values": [["a"]]}), encoding="utf-8")
        with pytest.raises(ValueError, match="Not a Google Sheets API payload"):
            load_sheets_api_json(path)

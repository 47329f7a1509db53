"""
Tests for the openpyxl workbook export and the command-line entry point.
"""

import datetime
import io
import os
import random
import sys

import pytest
from openpyxl import load_workbook

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import Pitch
from defaults import PRESET_NAMES, preset
from build_excel_model import (
    PitchFormatError,
    export_filename,
    generate_spreadsheet,
    generate_workbook,
    main,
    parse_pitch_arg,
)


def _rgb(color):
    return color.rgb[-6:]


@pytest.fixture(scope="module")
def fastball_wb():
    data = generate_spreadsheet([Pitch("Fastball", "FB", 100)], 1, random.Random(0))
    return load_workbook(io.BytesIO(data))


# ---------------------------------------------------------------------------
# Workbook structure
# ---------------------------------------------------------------------------

class TestWorkbook:

    def test_sheet_names(self, fastball_wb):
        assert fastball_wb.sheetnames == ["Player", "Coach"]

    def test_player_content(self, fastball_wb):
        ws = fastball_wb["Player"]
        assert ws["A1"].value == "M"
        assert ws["H1"].value == "P"
        assert ws["B1"].value == "10"
        assert ws["N8"].value == "45"
        assert ws["A9"].value == "1"
        assert ws["B2"].value == "FB"
        assert ws["N13"].value == "FB"

    def test_player_styles(self, fastball_wb):
        ws = fastball_wb["Player"]
        header = ws["A1"]
        assert _rgb(header.fill.start_color) == "FF0000"
        assert header.font.bold
        assert _rgb(header.font.color) == "FFFFFF"
        assert _rgb(ws["A7"].fill.start_color) == "FF0000"

        assert _rgb(ws["B2"].fill.start_color) == "FFFFFF"
        assert _rgb(ws["I2"].fill.start_color) == "CCE6FF"
        assert _rgb(ws["B9"].fill.start_color) == "D9D9D9"
        assert _rgb(ws["I9"].fill.start_color) == "C6EFCE"

        for ref in ("B2", "O13", "C7"):
            cell = ws[ref]
            assert cell.border.top.style == "thin"
            assert cell.alignment.horizontal == "center"
            assert cell.alignment.vertical == "center"

    def test_coach_content_and_header(self, fastball_wb):
        ws = fastball_wb["Coach"]
        assert ws.max_column == 1
        assert ws.max_row == 121
        assert ws["A1"].value == "Fastball"
        assert ws["A2"].value == "10-1"
        assert ws["A121"].value == "45-5"
        assert _rgb(ws["A1"].fill.start_color) == "000000"
        assert ws["A1"].font.bold
        assert _rgb(ws["A1"].font.color) == "FFFFFF"
        assert ws["A50"].border.left.style == "thin"

    def test_auto_width(self, fastball_wb):
        assert fastball_wb["Coach"].column_dimensions["A"].width == len("Fastball") + 1
        assert fastball_wb["Player"].column_dimensions["B"].width == 3

    def test_coach_columns_sorted_by_code(self):
        pitches = preset("Advanced Mix")
        wb = generate_workbook(pitches, 1, random.Random(8))
        header = [c.value for c in wb["Coach"][1]]
        by_code = {p.code: p.name for p in pitches}
        assert header == [by_code[c] for c in sorted(by_code)]

    def test_leading_equals_stays_text(self):
        data = generate_spreadsheet([Pitch("=Heater", "=HI", 100)], 1, random.Random(0))
        wb = load_workbook(io.BytesIO(data))

        coach = wb["Coach"]["A1"]
        assert coach.data_type == "s"
        assert coach.value == "=Heater"

        player = wb["Player"]["B2"]
        assert player.data_type == "s"
        assert player.value == "=HI"
        assert wb["Player"]["B1"].value == "10"

    def test_empty_pitch_list(self):
        wb = load_workbook(io.BytesIO(generate_spreadsheet([])))
        assert wb.sheetnames == ["Player", "Coach"]
        assert wb["Coach"]["A1"].value is None
        assert wb["Player"]["A1"].value == "M"

    def test_sheet_count_is_inert(self):
        pitches = preset("Basic Fastball Mix")
        one = generate_workbook(pitches, 1, random.Random(4))
        five = generate_workbook(pitches, 5, random.Random(4))
        assert five.sheetnames == ["Player", "Coach"]
        assert ([c.value for row in one["Player"].iter_rows() for c in row]
                == [c.value for row in five["Player"].iter_rows() for c in row])


def test_export_filename():
    now = datetime.datetime(2025, 2, 10, 7, 20, 41, tzinfo=datetime.timezone.utc)
    assert export_filename(now) == "pitch-card-2025-02-10T07-20-41.xlsx"


def test_presets_total_100():
    for name in PRESET_NAMES:
        assert sum(p.numeric_weight for p in preset(name)) == 100


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

class TestCli:

    def test_parse_pitch_arg(self):
        p = parse_pitch_arg("4-Seam Fastball:4FB:50")
        assert (p.name, p.code, p.numeric_weight) == ("4-Seam Fastball", "4FB", 50.0)

    def test_parse_pitch_arg_rejects_bad_text(self):
        with pytest.raises(PitchFormatError):
            parse_pitch_arg("Fastball:60")

    def test_writes_workbook(self, tmp_path):
        rc = main(["--pitch", "Fastball:FB:60", "--pitch", "Curve:CB:40",
                   "--seed", "3", "--output", str(tmp_path)])
        assert rc == 0
        files = list(tmp_path.glob("pitch-card-*.xlsx"))
        assert len(files) == 1
        assert load_workbook(files[0]).sheetnames == ["Player", "Coach"]

    def test_preset(self, tmp_path):
        assert main(["--preset", "HWC", "-o", str(tmp_path)]) == 0
        assert len(list(tmp_path.glob("*.xlsx"))) == 1

    def test_refuses_over_100_percent(self, tmp_path):
        rc = main(["--pitch", "A:A:80", "--pitch", "B:B:30", "-o", str(tmp_path)])
        assert rc == 2
        assert list(tmp_path.iterdir()) == []

    def test_malformed_pitch_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["--pitch", "nonsense", "-o", str(tmp_path)])

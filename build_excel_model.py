"""
Build the two-sheet Pitch Card workbook (Player + Coach).
Run this script to write pitch-card-<timestamp>.xlsx from a preset or
from pitches given on the command line.

Player sheet: two colored blocks (M10..15 / P20..25, M30..35 / P40..45)
with one random call per cell. Coach sheet: one column per pitch listing
the "column-row" references where it was called.
"""

from __future__ import annotations

import argparse
import datetime
import io
import logging
import os
import random
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

sys.path.insert(0, str(Path(__file__).resolve().parent))

from config import COL_COUNT, ROW_COUNT, AppSettings, CrossReferenceTable, LayoutMatrix, Pitch
from defaults import PRESET_NAMES, preset
from model import (
    build_cross_reference,
    build_layout,
    has_errors,
    is_header_cell,
    validate_pitches,
)

logger = logging.getLogger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PLAYER_SHEET = "Player"
COACH_SHEET = "Coach"

# ── Palette ──────────────────────────────────────────────────────────────
RED = "FF0000"
WHITE = "FFFFFF"
BLUE = "CCE6FF"
GRAY = "D9D9D9"
GREEN = "C6EFCE"
BLACK = "000000"


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


# ── Styles ───────────────────────────────────────────────────────────────
header_fill = _solid(RED)
coach_header_fill = _solid(BLACK)
REGION_FILLS = {
    "M1": _solid(WHITE),
    "P1": _solid(BLUE),
    "M2": _solid(GRAY),
    "P2": _solid(GREEN),
}

hdr_font = Font(bold=True, color=WHITE)

thin_border = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

align_center = Alignment(horizontal="center", vertical="center")


def _write_text(ws, row, col, text):
    """Write text as a literal string cell, even when it starts with "="."""
    cell = ws.cell(row=row, column=col, value=text or None)
    if text:
        cell.data_type = "s"
    return cell


def _frame_cell(cell):
    cell.border = thin_border
    cell.alignment = align_center


def auto_width(ws, rows: Sequence[Sequence[str]]) -> None:
    """Size each column to its longest text plus one character."""
    ncol = len(rows[0]) if rows else 0
    for c in range(ncol):
        longest = max((len(str(r[c] or "")) for r in rows if c < len(r)), default=0)
        ws.column_dimensions[get_column_letter(c + 1)].width = longest + 1


# ═════════════════════════════════════════════════════════════════════════
# SHEET 1: PLAYER
# ═════════════════════════════════════════════════════════════════════════
def build_player_sheet(wb: Workbook, layout: LayoutMatrix):
    ws = wb.active
    ws.title = PLAYER_SHEET

    texts = layout.texts()
    for r in range(ROW_COUNT):
        for c in range(COL_COUNT):
            cell = _write_text(ws, r + 1, c + 1, texts[r][c])
            _frame_cell(cell)

            if is_header_cell(r, c):
                cell.fill = header_fill
                cell.font = hdr_font
                continue

            region = layout.region_at(r, c)
            if region is not None:
                cell.fill = REGION_FILLS[region.key]

    auto_width(ws, texts)
    return ws


# ═════════════════════════════════════════════════════════════════════════
# SHEET 2: COACH
# ═════════════════════════════════════════════════════════════════════════
def build_coach_sheet(wb: Workbook, table: CrossReferenceTable):
    ws = wb.create_sheet(COACH_SHEET)

    rows = table.rows()
    for r, values in enumerate(rows):
        for c, value in enumerate(values):
            cell = _write_text(ws, r + 1, c + 1, value)
            _frame_cell(cell)
            if r == 0:
                cell.fill = coach_header_fill
                cell.font = hdr_font

    auto_width(ws, rows)
    return ws


# ═════════════════════════════════════════════════════════════════════════
# EXPORT
# ═════════════════════════════════════════════════════════════════════════
def generate_workbook(
    pitches: Sequence[Pitch],
    sheet_count: int = 1,
    rng: Optional[random.Random] = None,
) -> Workbook:
    """Player + Coach workbook. `sheet_count` is accepted but not used."""
    if sheet_count != 1:
        logger.debug("sheet_count=%s ignored; one Player/Coach pair is produced", sheet_count)

    layout = build_layout(pitches, rng)
    table = build_cross_reference(layout, pitches)

    wb = Workbook()
    build_player_sheet(wb, layout)
    build_coach_sheet(wb, table)
    return wb


def workbook_bytes(wb: Workbook) -> bytes:
    with io.BytesIO() as buf:
        wb.save(buf)
        return buf.getvalue()


def generate_spreadsheet(
    pitches: Sequence[Pitch],
    sheet_count: int = 1,
    rng: Optional[random.Random] = None,
) -> bytes:
    data = workbook_bytes(generate_workbook(pitches, sheet_count, rng))
    logger.info("Generated pitch card for %d pitches (%d bytes)", len(pitches), len(data))
    return data


def export_filename(now: Optional[datetime.datetime] = None) -> str:
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return f"pitch-card-{now.strftime('%Y-%m-%dT%H-%M-%S')}.xlsx"


# ═════════════════════════════════════════════════════════════════════════
# MAIN
# ═════════════════════════════════════════════════════════════════════════
class PitchFormatError(ValueError):
    """A --pitch argument that is not NAME:CODE:WEIGHT."""


def parse_pitch_arg(text: str) -> Pitch:
    parts = text.rsplit(":", 2)
    if len(parts) != 3 or not parts[1].strip():
        raise PitchFormatError(f"Expected NAME:CODE:WEIGHT, got {text!r}")
    name, code, weight = (p.strip() for p in parts)
    return Pitch(name=name, code=code, weight=weight)


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, level_str.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a Player/Coach pitch card workbook")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--preset", "-p", choices=PRESET_NAMES,
        help="Use one of the built-in pitch mixes",
    )
    source.add_argument(
        "--pitch", action="append", type=str, metavar="NAME:CODE:WEIGHT",
        help="Add a pitch (repeatable), e.g. --pitch Fastball:FB:60",
    )
    parser.add_argument("--sheets", type=int, default=1,
                        help="Number of sheets (accepted, currently has no effect)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for reproducible cards")
    parser.add_argument("--output", "-o", type=str, default=".",
                        help="Output directory (default: current directory)")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Logging level: DEBUG, INFO, WARNING, ERROR")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = AppSettings.from_env()
    setup_logging(args.log_level or settings.log_level)

    if args.preset:
        pitches = preset(args.preset)
    else:
        try:
            pitches = [parse_pitch_arg(p) for p in args.pitch]
        except PitchFormatError as exc:
            parser.error(str(exc))

    issues = validate_pitches(pitches)
    for issue in issues:
        log = logger.error if issue.level == "error" else logger.warning
        log(issue.message)
    if has_errors(issues):
        return 2

    rng = random.Random(args.seed) if args.seed is not None else None
    data = generate_spreadsheet(pitches, args.sheets, rng)

    os.makedirs(args.output, exist_ok=True)
    out_path = os.path.join(args.output, export_filename())
    with open(out_path, "wb") as f:
        f.write(data)
    logger.info("Saved to: %s", out_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

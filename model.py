"""
Pitch Card Calculation Engine
Weighted random calls -> Player grid -> Coach cross-reference.
Everything here is pure: no file or UI access.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from config import (
    COL_COUNT,
    HEADER_COLS,
    HEADER_ROWS,
    REGION_COLS,
    REGION_ROWS,
    REGIONS,
    ROW_COUNT,
    ROW_TAGS,
    Cell,
    CrossReferenceTable,
    LayoutMatrix,
    Pitch,
)

logger = logging.getLogger(__name__)

MAX_CODE_LENGTH = 3
MAX_TOTAL_PERCENT = 100.0


# ---------------------------------------------------------------------------
# Weighted sequence generator
# ---------------------------------------------------------------------------

def generate_pitch_sequence(
    pitches: Sequence[Pitch],
    length: int,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Draw `length` pitch codes, each with probability proportional to its weight.

    Zero total weight falls back to the first pitch for every draw; an empty
    pitch list yields empty picks.
    """
    rng = rng or random.Random()
    if not pitches:
        logger.debug("No pitches defined; returning %d empty picks", length)
        return [""] * length

    weights = [p.numeric_weight for p in pitches]
    total = sum(weights)
    fallback = pitches[0].code

    sequence: List[str] = []
    for _ in range(length):
        u = rng.random() * total
        selected = fallback
        cumulative = 0.0
        for pitch, w in zip(pitches, weights):
            cumulative += w
            if u <= cumulative:
                selected = pitch.code
                break
        sequence.append(selected)
    return sequence


# ---------------------------------------------------------------------------
# Layout generator (Player sheet)
# ---------------------------------------------------------------------------

def _structural_cells(grid: List[List[Cell]]) -> None:
    for block, header_row in enumerate(HEADER_ROWS, start=1):
        for region in (r for r in REGIONS if r.block == block):
            marker_col = region.left - 1
            grid[header_row][marker_col] = Cell(text=region.marker)
            for i, tag in enumerate(region.column_tags):
                grid[header_row][region.left + i] = Cell(text=tag)
            for i, tag in enumerate(ROW_TAGS):
                grid[header_row + 1 + i][marker_col] = Cell(text=tag)


def build_layout(
    pitches: Sequence[Pitch],
    rng: Optional[random.Random] = None,
) -> LayoutMatrix:
    rng = rng or random.Random()
    grid = [[Cell() for _ in range(COL_COUNT)] for _ in range(ROW_COUNT)]
    _structural_cells(grid)

    per_region = REGION_ROWS * REGION_COLS
    for block in sorted({r.block for r in REGIONS}):
        regions = [r for r in REGIONS if r.block == block]
        calls = iter(generate_pitch_sequence(pitches, per_region * len(regions), rng))
        for region in regions:
            for rr in range(REGION_ROWS):
                for cc in range(REGION_COLS):
                    code = next(calls)
                    grid[region.top + rr][region.left + cc] = Cell(
                        text=code,
                        code=code,
                        column_tag=region.column_tags[cc],
                        row_tag=ROW_TAGS[rr],
                    )

    return LayoutMatrix(cells=tuple(tuple(row) for row in grid))


def is_header_cell(row: int, col: int) -> bool:
    return row in HEADER_ROWS or col in HEADER_COLS


# ---------------------------------------------------------------------------
# Cross-reference builder (Coach sheet)
# ---------------------------------------------------------------------------

def _reference_key(ref: str):
    col, row = ref.split("-", 1)
    return int(col), int(row)


def sort_references(refs: Sequence[str]) -> List[str]:
    """Numeric sort by column tag, then row tag ("2-2" < "2-10" < "10-1")."""
    return sorted(refs, key=_reference_key)


def build_cross_reference(
    layout: LayoutMatrix,
    pitches: Sequence[Pitch],
) -> CrossReferenceTable:
    names: Dict[str, str] = {}
    for p in pitches:
        names.setdefault(p.code, p.name)

    buckets: Dict[str, List[str]] = {}
    for cell in layout.data_cells():
        if not cell.code:
            continue
        buckets.setdefault(cell.code, []).append(cell.coordinate)

    codes = sorted(buckets)
    logger.debug("Cross-reference: %d codes, %d references",
                 len(codes), sum(len(v) for v in buckets.values()))
    return CrossReferenceTable(
        codes=codes,
        names={c: names[c] for c in codes if c in names},
        references={c: sort_references(buckets[c]) for c in codes},
    )


def call_distribution(layout: LayoutMatrix) -> Dict[str, float]:
    """Share of Player-sheet calls per code, in percent."""
    counts = Counter(cell.code for cell in layout.data_cells() if cell.code)
    total = sum(counts.values())
    if total == 0:
        return {}
    return {code: 100.0 * n / total for code, n in sorted(counts.items())}


# ---------------------------------------------------------------------------
# Input validation (used by the UI and CLI, never by generation)
# ---------------------------------------------------------------------------

@dataclass
class ValidationIssue:
    level: str  # "error" | "warning"
    message: str


def total_percentage(pitches: Sequence[Pitch]) -> float:
    return sum(p.numeric_weight for p in pitches)


def validate_pitches(pitches: Sequence[Pitch]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []

    total = total_percentage(pitches)
    if total > MAX_TOTAL_PERCENT:
        issues.append(ValidationIssue(
            "error", f"Pitch percentages add up to {total:g}% — they must not exceed 100%"))

    seen: Dict[str, str] = {}
    for i, p in enumerate(pitches, start=1):
        label = p.name or f"Row {i}"
        if not p.code.strip():
            issues.append(ValidationIssue("warning", f"{label}: abbreviation is empty"))
        elif len(p.code) > MAX_CODE_LENGTH:
            issues.append(ValidationIssue(
                "warning", f"{label}: abbreviation '{p.code}' is longer than {MAX_CODE_LENGTH} characters"))
        if p.code and p.code in seen:
            issues.append(ValidationIssue(
                "warning",
                f"{label}: abbreviation '{p.code}' is also used by {seen[p.code]}; "
                "their calls are merged on the Coach sheet"))
        else:
            seen.setdefault(p.code, label)

    return issues


def has_errors(issues: Sequence[ValidationIssue]) -> bool:
    return any(i.level == "error" for i in issues)

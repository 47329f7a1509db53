from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

# ---------------------------------------------------------------------------
# Player sheet geometry
# ---------------------------------------------------------------------------
ROW_COUNT = 13
COL_COUNT = 15
REGION_ROWS = 5
REGION_COLS = 6
HEADER_ROWS = (0, 7)
HEADER_COLS = (0, 7)
ROW_TAGS = tuple(str(r) for r in range(1, REGION_ROWS + 1))

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_weight(value: Union[float, int, str, None]) -> float:
    """Coerce a weight to a non-negative float.

    Text is read like a browser form field: the leading number is used
    ("25%" -> 25.0) and anything unreadable counts as 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(1))
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


@dataclass
class Pitch:
    """One selectable category on the card (e.g. Fastball / FB / 40)."""

    name: str
    code: str
    weight: Union[float, str] = 0.0

    @property
    def numeric_weight(self) -> float:
        return parse_weight(self.weight)


@dataclass(frozen=True)
class Cell:
    text: str = ""
    code: Optional[str] = None
    column_tag: Optional[str] = None
    row_tag: Optional[str] = None

    @property
    def is_data(self) -> bool:
        return self.column_tag is not None and self.row_tag is not None

    @property
    def coordinate(self) -> Optional[str]:
        if not self.is_data:
            return None
        return f"{self.column_tag}-{self.row_tag}"


@dataclass(frozen=True)
class Region:
    """A 5x6 block of random calls on the Player sheet."""

    key: str
    block: int
    marker: str
    top: int
    left: int
    column_tags: Tuple[str, ...]

    def contains(self, row: int, col: int) -> bool:
        return (
            self.top <= row < self.top + REGION_ROWS
            and self.left <= col < self.left + REGION_COLS
        )


def _region(key: str, block: int, marker: str, top: int, left: int, first_tag: int) -> Region:
    tags = tuple(str(first_tag + i) for i in range(REGION_COLS))
    return Region(key, block, marker, top, left, tags)


# Scan order: block 1 (M then P), block 2 (M then P).
REGIONS: Tuple[Region, ...] = (
    _region("M1", 1, "M", 1, 1, 10),
    _region("P1", 1, "P", 1, 8, 20),
    _region("M2", 2, "M", 8, 1, 30),
    _region("P2", 2, "P", 8, 8, 40),
)


@dataclass(frozen=True)
class LayoutMatrix:
    """The Player sheet content, 13 rows x 15 columns."""

    cells: Tuple[Tuple[Cell, ...], ...]

    def data_cells(self) -> List[Cell]:
        return [cell for row in self.cells for cell in row if cell.is_data]

    def region_at(self, row: int, col: int) -> Optional[Region]:
        for region in REGIONS:
            if region.contains(row, col):
                return region
        return None

    def texts(self) -> List[List[str]]:
        return [[cell.text for cell in row] for row in self.cells]


@dataclass
class CrossReferenceTable:
    """Coach sheet content model: sorted coordinates per pitch code."""

    codes: List[str] = field(default_factory=list)
    names: Dict[str, str] = field(default_factory=dict)
    references: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def total_references(self) -> int:
        return sum(len(refs) for refs in self.references.values())

    def headers(self) -> List[str]:
        """Row 0 of the Coach sheet; repeated names get their code appended."""
        names = [self.names.get(c) or c for c in self.codes]
        return [
            f"{n} ({c})" if names.count(n) > 1 else n
            for n, c in zip(names, self.codes)
        ]

    def rows(self) -> List[List[str]]:
        depth = max((len(self.references[c]) for c in self.codes), default=0)
        out = [[self.names.get(c) or c for c in self.codes]]
        for i in range(depth):
            out.append([
                self.references[c][i] if i < len(self.references[c]) else ""
                for c in self.codes
            ])
        return out


@dataclass
class CardConfig:
    """All user inputs for one export."""

    pitches: List[Pitch] = field(default_factory=list)
    # Accepted for compatibility; one Player/Coach pair is always produced.
    sheet_count: int = 1
    seed: Optional[int] = None


@dataclass
class AppSettings:
    store_path: str = os.path.join("data", "pitches.json")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppSettings":
        defaults = cls()
        return cls(
            store_path=os.environ.get("PITCH_CARD_STORE", defaults.store_path),
            log_level=os.environ.get("PITCH_CARD_LOG_LEVEL", defaults.log_level),
        )

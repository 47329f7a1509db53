"""Draft pitch list persistence for the form (loaded on start, saved on change)."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from config import Pitch, parse_weight
from model import MAX_CODE_LENGTH, MAX_TOTAL_PERCENT

logger = logging.getLogger(__name__)

STORE_KEY = "pitches"


def pitch_to_dict(p: Pitch) -> dict:
    return {"name": p.name, "abbreviation": p.code, "percentage": str(p.weight)}


def pitch_from_dict(d: dict) -> Pitch:
    """Rebuild a form row, trimming values the form inputs cannot hold."""
    name = str(d.get("name", ""))
    code = str(d.get("abbreviation", ""))
    weight = d.get("percentage", "")

    if len(code) > MAX_CODE_LENGTH:
        logger.warning("Saved abbreviation %r truncated to %d characters", code, MAX_CODE_LENGTH)
        code = code[:MAX_CODE_LENGTH]

    if weight not in ("", None):
        value = parse_weight(weight)
        if value > MAX_TOTAL_PERCENT:
            logger.warning("Saved percentage %r for %r clamped to %g", weight, name, MAX_TOTAL_PERCENT)
            weight = MAX_TOTAL_PERCENT
        else:
            weight = value

    return Pitch(name=name, code=code, weight=weight)


class PitchStore(ABC):
    @abstractmethod
    def load(self) -> Optional[List[Pitch]]:
        raise NotImplementedError

    @abstractmethod
    def save(self, pitches: Sequence[Pitch]) -> None:
        raise NotImplementedError


class MemoryPitchStore(PitchStore):
    def __init__(self, pitches: Optional[Sequence[Pitch]] = None):
        self._data = None if pitches is None else [pitch_to_dict(p) for p in pitches]

    def load(self) -> Optional[List[Pitch]]:
        if self._data is None:
            return None
        return [pitch_from_dict(d) for d in self._data]

    def save(self, pitches: Sequence[Pitch]) -> None:
        self._data = [pitch_to_dict(p) for p in pitches]


class JsonPitchStore(PitchStore):
    """Stores {"pitches": [...]} in a JSON file."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[List[Pitch]]:
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read saved pitches from %s: %s", self.path, exc)
            return None

        rows = loaded.get(STORE_KEY) if isinstance(loaded, dict) else None
        if not isinstance(rows, list):
            logger.warning("Ignoring malformed pitch store %s", self.path)
            return None

        return [pitch_from_dict(d) for d in rows if isinstance(d, dict)]

    def save(self, pitches: Sequence[Pitch]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({STORE_KEY: [pitch_to_dict(p) for p in pitches]}, f, indent=2)

"""Built-in pitch presets."""

from typing import Dict, List, Tuple

from config import Pitch

_PRESET_TABLE: Dict[str, List[Tuple[str, str, float]]] = {
    "Basic Fastball Mix": [
        ("4-Seam Fastball", "4FB", 50),
        ("2-Seam Fastball", "2FB", 30),
        ("Change Up", "CH", 20),
    ],
    "Advanced Mix": [
        ("4-Seam Fastball", "4FB", 40),
        ("Curveball", "CB", 20),
        ("Slider", "SL", 20),
        ("Change Up", "CH", 20),
    ],
    "HWC": [
        ("Fast Ball", "FB", 10),
        ("Curve Ball", "CB", 10),
        ("Fast In", "FN", 10),
        ("Fast Out", "FO", 10),
        ("Curve Out", "CO", 10),
        ("Curve", "C", 10),
        ("Screw Ball", "SB", 10),
        ("Pitch Out", "PO", 10),
        ("Change", "G", 10),
        ("Change Out", "GO", 10),
    ],
}

PRESET_NAMES = list(_PRESET_TABLE)


def preset(name: str) -> List[Pitch]:
    """Fresh copy of a preset's pitches. Raises KeyError for unknown names."""
    return [Pitch(name=n, code=c, weight=w) for n, c, w in _PRESET_TABLE[name]]


def blank_pitch() -> Pitch:
    return Pitch(name="", code="", weight="")

import json
import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import AppSettings, Pitch
from defaults import blank_pitch, preset
from storage import JsonPitchStore, MemoryPitchStore, PitchStore


def test_json_round_trip(tmp_path):
    store = JsonPitchStore(tmp_path / "nested" / "pitches.json")
    pitches = preset("Basic Fastball Mix")
    store.save(pitches)

    loaded = store.load()
    assert [(p.name, p.code, p.numeric_weight) for p in loaded] == [
        ("4-Seam Fastball", "4FB", 50.0),
        ("2-Seam Fastball", "2FB", 30.0),
        ("Change Up", "CH", 20.0),
    ]


def test_file_layout_uses_fixed_key(tmp_path):
    path = tmp_path / "pitches.json"
    JsonPitchStore(path).save([Pitch("Slider", "SL", "15")])
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw == {"pitches": [{"name": "Slider", "abbreviation": "SL", "percentage": "15"}]}


def test_missing_file_loads_none(tmp_path):
    assert JsonPitchStore(tmp_path / "nope.json").load() is None


def test_malformed_file_loads_none(tmp_path):
    path = tmp_path / "pitches.json"
    path.write_text("{not json", encoding="utf-8")
    assert JsonPitchStore(path).load() is None

    path.write_text('{"pitches": 3}', encoding="utf-8")
    assert JsonPitchStore(path).load() is None


def test_blank_row_survives(tmp_path):
    store = JsonPitchStore(tmp_path / "pitches.json")
    store.save([blank_pitch()])
    [p] = store.load()
    assert (p.name, p.code, p.numeric_weight) == ("", "", 0.0)


def test_load_trims_values_the_form_cannot_hold(tmp_path, caplog):
    path = tmp_path / "pitches.json"
    path.write_text(json.dumps({"pitches": [
        {"name": "Knuckle", "abbreviation": "KNUC", "percentage": "150"},
        {"name": "Splitter", "abbreviation": "SP", "percentage": "12.5"},
    ]}), encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="storage"):
        knuckle, splitter = JsonPitchStore(path).load()

    assert (knuckle.code, knuckle.numeric_weight) == ("KNU", 100.0)
    assert (splitter.code, splitter.numeric_weight) == ("SP", 12.5)
    assert "truncated" in caplog.text
    assert "clamped" in caplog.text


def test_store_port_is_abstract():
    with pytest.raises(TypeError):
        PitchStore()

    class HalfStore(PitchStore):
        def load(self):
            return None

    with pytest.raises(TypeError):
        HalfStore()


def test_memory_store():
    store = MemoryPitchStore()
    assert store.load() is None
    store.save([Pitch("Curve", "CB", 40)])
    assert store.load()[0].code == "CB"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PITCH_CARD_STORE", "/tmp/card.json")
    monkeypatch.delenv("PITCH_CARD_LOG_LEVEL", raising=False)
    settings = AppSettings.from_env()
    assert settings.store_path == "/tmp/card.json"
    assert settings.log_level == "INFO"

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.seating.presets.catalog import (
    BOOTH_RADIAL_UNITS,
    GRID,
    MAX_CIRCLE_COUNT,
    MAX_SIDE_COUNT,
    MIN_SEAT_SIZE,
    default_preset_id,
    get_preset,
    get_preset_layers,
)
from src.seating.spec.types import TableShape


def test_catalog_constants():
    assert GRID == 10.0
    assert MIN_SEAT_SIZE == 4.0
    assert MAX_SIDE_COUNT == 32
    assert MAX_CIRCLE_COUNT == 64
    assert BOOTH_RADIAL_UNITS == {"boothCurved": 2, "boothU": 4}


def test_default_preset_ids():
    assert default_preset_id("rectangle") == "dining_v1"
    assert default_preset_id(TableShape.circle) == "round_v1"
    assert default_preset_id("hexagon") == "default"


def test_unknown_preset_falls_back_to_shape_default():
    assert get_preset("rectangle", "unknown_preset") == get_preset("rectangle", "dining_v1")


def test_explicit_default_uses_global_defaults_only():
    layers = get_preset_layers("rectangle", "default")
    assert [layer.layer_id for layer in layers] == ["global"]
    preset = get_preset("rectangle", "default")
    assert preset["sizing"] == {"chair_width": 30.0, "chair_height": 10.0, "chair_spacing": 5.0}


def test_layers_apply_in_precedence_order():
    layers = get_preset_layers("rectangle", "dining_v1", "compact")
    assert [layer.layer_id for layer in layers] == [
        "global",
        "preset:dining_v1",
        "variant:dining_v1:compact",
    ]
    preset = get_preset("rectangle", "dining_v1", "compact")
    assert preset["sizing"]["chair_width"] == 24.0
    assert preset["sizing"]["chair_height"] == 10.0


def test_unknown_variant_is_ignored():
    assert get_preset("rectangle", "dining_v1", "giant") == get_preset("rectangle", "dining_v1")


def test_preset_patch_keeps_untouched_defaults():
    preset = get_preset("rectangle", "bar_counter_v1")
    assert preset["sizing"]["chair_spacing"] == 2.0
    assert preset["sizing"]["chair_width"] == 30.0
    assert preset["seating"]["side_variant"] == "barstool"
    assert preset["seating"]["corner_variant"] == "standard"


def test_get_preset_returns_copies():
    preset = get_preset("circle", "lounge_v1")
    preset["seating"]["circle_variant"] = "standard"
    assert get_preset("circle", "lounge_v1")["seating"]["circle_variant"] == "boothCurved"

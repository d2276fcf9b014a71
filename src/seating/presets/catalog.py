"""Seating defaults catalog.

Merge precedence (low -> high):
1) global defaults
2) table shape base overrides
3) preset overrides
4) optional preset variant overrides

Values stored in a persisted configuration remain the highest-precedence
layer and are applied by the schema/pipeline layer.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Mapping

PresetDict = dict[str, Any]


@dataclass(frozen=True)
class PresetDefinition:
    base: Mapping[str, Any] = field(default_factory=dict)
    variants: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class ShapeDefinition:
    default_preset_id: str = "default"
    base: Mapping[str, Any] = field(default_factory=dict)
    presets: Mapping[str, PresetDefinition] = field(default_factory=dict)


@dataclass(frozen=True)
class PresetLayer:
    layer_id: str
    values: Mapping[str, Any]


_GLOBAL_DEFAULTS: PresetDict = {
    "grid": 10.0,
    "sizing": {
        "chair_width": 30.0,
        "chair_height": 10.0,
        "chair_spacing": 5.0,
    },
    "limits": {
        "min_seat_size": 4.0,
        "max_side_count": 32,
        "max_circle_count": 64,
    },
    "clearance": {
        "edge": 1.5,
        "corner": 0.675,
    },
    "booth": {
        "wall_thickness": 30.0,
        "radial_units": {
            "boothCurved": 2,
            "boothU": 4,
        },
    },
    "seating": {
        "side_count": 0,
        "side_variant": "standard",
        "corner_variant": "standard",
        "circle_count": 0,
        "circle_start_deg": 0.0,
        "circle_variant": "standard",
    },
}

_SHAPE_DEFINITIONS: dict[str, ShapeDefinition] = {
    "rectangle": ShapeDefinition(
        default_preset_id="dining_v1",
        presets={
            "dining_v1": PresetDefinition(
                variants={
                    "compact": {
                        "sizing": {
                            "chair_width": 24.0,
                            "chair_spacing": 4.0,
                        },
                    },
                },
            ),
            "bar_counter_v1": PresetDefinition(
                base={
                    "sizing": {
                        "chair_spacing": 2.0,
                    },
                    "seating": {
                        "side_variant": "barstool",
                    },
                },
            ),
        },
    ),
    "circle": ShapeDefinition(
        default_preset_id="round_v1",
        presets={
            "round_v1": PresetDefinition(),
            "lounge_v1": PresetDefinition(
                base={
                    "seating": {
                        "circle_variant": "boothCurved",
                    },
                },
            ),
        },
    ),
}


def _deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> PresetDict:
    merged: PresetDict = deepcopy(dict(base))
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def _normalize_shape(shape: str) -> str:
    value = getattr(shape, "value", shape)
    normalized_shape = str(value or "").strip().lower()
    return normalized_shape or "default"


def _normalize_preset_id(shape: str, preset_id: str | None) -> str:
    normalized = str(preset_id or "").strip()
    if normalized:
        return normalized
    return default_preset_id(shape)


def default_preset_id(shape: str) -> str:
    normalized_shape = _normalize_shape(shape)
    shape_definition = _SHAPE_DEFINITIONS.get(normalized_shape)
    if shape_definition is None:
        return "default"
    default_id = str(shape_definition.default_preset_id or "").strip()
    return default_id or "default"


def get_preset_layers(
    shape: str,
    preset_id: str | None,
    variant_id: str | None = None,
) -> tuple[PresetLayer, ...]:
    normalized_shape = _normalize_shape(shape)
    normalized_preset_id = _normalize_preset_id(normalized_shape, preset_id)
    normalized_variant_id = str(variant_id or "").strip()

    layers: list[PresetLayer] = [PresetLayer(layer_id="global", values=_GLOBAL_DEFAULTS)]

    shape_definition = _SHAPE_DEFINITIONS.get(normalized_shape)
    if shape_definition is None:
        return tuple(layers)

    if shape_definition.base:
        layers.append(PresetLayer(layer_id=f"shape:{normalized_shape}", values=shape_definition.base))

    selected_preset_id = normalized_preset_id
    selected_preset = shape_definition.presets.get(selected_preset_id)
    if selected_preset is None and normalized_preset_id != "default":
        selected_preset_id = default_preset_id(normalized_shape)
        selected_preset = shape_definition.presets.get(selected_preset_id)

    if selected_preset is None:
        return tuple(layers)

    layers.append(PresetLayer(layer_id=f"preset:{selected_preset_id}", values=selected_preset.base))

    if normalized_variant_id:
        variant_patch = selected_preset.variants.get(normalized_variant_id)
        if variant_patch:
            layers.append(
                PresetLayer(
                    layer_id=f"variant:{selected_preset_id}:{normalized_variant_id}",
                    values=variant_patch,
                )
            )

    return tuple(layers)


def get_preset(shape: str, preset_id: str | None, variant_id: str | None = None) -> PresetDict:
    """Return merged seating defaults for shape/preset_id."""
    layers = get_preset_layers(shape=shape, preset_id=preset_id, variant_id=variant_id)
    merged: PresetDict = {}
    for layer in layers:
        merged = _deep_merge(merged, layer.values)
    return merged


GRID = float(_GLOBAL_DEFAULTS["grid"])
MIN_SEAT_SIZE = float(_GLOBAL_DEFAULTS["limits"]["min_seat_size"])
MAX_SIDE_COUNT = int(_GLOBAL_DEFAULTS["limits"]["max_side_count"])
MAX_CIRCLE_COUNT = int(_GLOBAL_DEFAULTS["limits"]["max_circle_count"])
EDGE_CLEARANCE = float(_GLOBAL_DEFAULTS["clearance"]["edge"])
CORNER_CLEARANCE = float(_GLOBAL_DEFAULTS["clearance"]["corner"])
BOOTH_WALL_THICKNESS = float(_GLOBAL_DEFAULTS["booth"]["wall_thickness"])
BOOTH_RADIAL_UNITS: dict[str, int] = dict(_GLOBAL_DEFAULTS["booth"]["radial_units"])
DEFAULT_CHAIR_WIDTH = float(_GLOBAL_DEFAULTS["sizing"]["chair_width"])
DEFAULT_CHAIR_HEIGHT = float(_GLOBAL_DEFAULTS["sizing"]["chair_height"])
DEFAULT_CHAIR_SPACING = float(_GLOBAL_DEFAULTS["sizing"]["chair_spacing"])

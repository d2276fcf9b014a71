"""Stable serialization of layout results for regression snapshots."""

from __future__ import annotations

from enum import Enum
from typing import Any

from src.seating.plan_types import LayoutResult


def _round_value(value: Any):
    if isinstance(value, bool):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (int, float)):
        return round(float(value), 6)
    if isinstance(value, (list, tuple)):
        return [_round_value(item) for item in value]
    if isinstance(value, dict):
        normalized: dict[str, Any] = {}
        for key in sorted(value):
            normalized[str(key)] = _round_value(value[key])
        return normalized
    return value


def layout_to_snapshot(result: LayoutResult) -> dict[str, Any]:
    placements: list[dict[str, Any]] = []
    for placement in result.placements:
        placements.append(
            {
                "ref": placement.source_ref.label(),
                "variant": placement.variant.value,
                "center": _round_value(placement.center),
                "orientation_deg": _round_value(placement.orientation_deg),
                "size": _round_value((placement.width, placement.height)),
            }
        )

    effective = result.effective
    sizing = {
        "chair_width": effective.sizing.chair_width,
        "chair_height": effective.sizing.chair_height,
        "chair_spacing": effective.sizing.chair_spacing,
    }
    seat_sizes = {
        ref.label(): {"w": size.w, "h": size.h}
        for ref, size in effective.seat_sizes.items()
    }
    return {
        "placements": placements,
        "sizing": _round_value(sizing),
        "seat_sizes": _round_value(seat_sizes),
    }

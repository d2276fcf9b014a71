from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.seating.edits import (
    decrement_side,
    default_configuration,
    increment_side,
    set_circle_count,
    set_circle_start,
    set_circle_variant,
    set_corner,
    set_side_variant,
)
from src.seating.spec.types import (
    Corner,
    CornerSpec,
    EffectiveConfiguration,
    InvalidArgumentError,
    SeatingContext,
    SeatSizing,
    SeatVariant,
    Side,
    SideSpec,
    TableGeometry,
    TableShape,
)

RECT = TableGeometry(shape=TableShape.rectangle, width=120.0, height=80.0)
ROUND = TableGeometry(shape=TableShape.circle, width=160.0, height=160.0)


class ListDiagnosticsSink:
    def __init__(self) -> None:
        self.events = []

    def emit(self, event) -> None:
        self.events.append(event)


def _ctx(sink: ListDiagnosticsSink) -> SeatingContext:
    return SeatingContext(run_id="run-edit", debug=False, diag=sink)


def test_default_configuration_rectangle():
    effective = default_configuration(RECT)
    assert isinstance(effective, EffectiveConfiguration)
    assert effective.sizing == SeatSizing(chair_width=30.0, chair_height=10.0, chair_spacing=5.0)
    assert effective.rectangle.top == SideSpec()
    assert effective.circle is None


def test_default_configuration_uses_preset_layers():
    compact = default_configuration(RECT, variant_id="compact")
    assert compact.sizing.chair_width == 24.0
    assert compact.sizing.chair_spacing == 4.0
    bar = default_configuration(RECT, preset_id="bar_counter_v1")
    assert bar.sizing.chair_spacing == 2.0
    assert bar.rectangle.top == SideSpec()


def test_default_configuration_circle():
    effective = default_configuration(ROUND)
    assert effective.circle.count == 0
    assert effective.rectangle is None


def test_increment_side_stops_at_capacity():
    sink = ListDiagnosticsSink()
    effective = default_configuration(RECT)
    for _ in range(5):
        effective = increment_side(RECT, effective, Side.top, ctx=_ctx(sink))
    assert effective.rectangle.top == SideSpec(3)
    codes = [event.code for event in sink.events]
    assert codes.count("EDIT_APPLIED") == 3
    assert codes.count("EDIT_IGNORED") == 2
    assert all(event.stage == "edit" for event in sink.events)


def test_increment_empty_side_takes_preset_variant():
    effective = default_configuration(RECT, preset_id="bar_counter_v1")
    effective = increment_side(RECT, effective, Side.bottom, preset_id="bar_counter_v1")
    assert effective.rectangle.bottom == SideSpec(1, SeatVariant.bar_stool)


def test_decrement_side_resets_variant_when_empty():
    effective = default_configuration(RECT)
    effective = set_side_variant(RECT, effective, Side.top, SeatVariant.booth_u)
    assert effective.rectangle.top == SideSpec(1, SeatVariant.booth_u)
    effective = decrement_side(RECT, effective, Side.top)
    assert effective.rectangle.top == SideSpec()
    assert decrement_side(RECT, effective, Side.top) == effective


def test_u_booth_blocks_other_edits():
    sink = ListDiagnosticsSink()
    effective = default_configuration(RECT)
    effective = set_side_variant(RECT, effective, Side.top, SeatVariant.booth_u)

    assert set_side_variant(RECT, effective, Side.bottom, SeatVariant.booth_u, ctx=_ctx(sink)) == effective
    assert increment_side(RECT, effective, Side.left, ctx=_ctx(sink)) == effective
    assert set_corner(RECT, effective, Corner.tl, True, ctx=_ctx(sink)) == effective
    assert [event.code for event in sink.events] == ["EDIT_IGNORED"] * 3


def test_set_side_variant_maps_curved_booth_to_u_booth():
    effective = set_side_variant(RECT, default_configuration(RECT), Side.left, SeatVariant.booth_semicircular)
    assert effective.rectangle.left == SideSpec(1, SeatVariant.booth_u)


def test_set_side_variant_keeps_count():
    effective = default_configuration(RECT)
    effective = increment_side(RECT, effective, Side.top)
    effective = increment_side(RECT, effective, Side.top)
    effective = set_side_variant(RECT, effective, Side.top, SeatVariant.bar_stool)
    assert effective.rectangle.top == SideSpec(2, SeatVariant.bar_stool)


def test_set_corner_booth_falls_back_to_standard():
    effective = set_corner(RECT, default_configuration(RECT), Corner.br, True, SeatVariant.booth_u)
    assert effective.rectangle.br == CornerSpec(True, SeatVariant.standard)
    effective = set_corner(RECT, effective, Corner.br, False)
    assert effective.rectangle.br == CornerSpec()


def test_set_circle_count_is_clamped():
    effective = set_circle_count(ROUND, default_configuration(ROUND), 70)
    assert effective.circle.count == 16
    with pytest.raises(InvalidArgumentError):
        set_circle_count(ROUND, effective, -1)


def test_set_circle_count_fills_with_preset_variant():
    effective = default_configuration(ROUND, preset_id="lounge_v1")
    effective = set_circle_count(ROUND, effective, 4, preset_id="lounge_v1")
    assert effective.circle.count == 2
    assert effective.circle.variants == (SeatVariant.booth_semicircular, SeatVariant.standard)


def test_set_circle_variant_rejects_close_booths():
    sink = ListDiagnosticsSink()
    effective = set_circle_count(ROUND, default_configuration(ROUND), 5)
    effective = set_circle_variant(ROUND, effective, 0, SeatVariant.booth_semicircular)
    assert effective.circle.variants[0] == SeatVariant.booth_semicircular

    unchanged = set_circle_variant(ROUND, effective, 1, SeatVariant.booth_semicircular, ctx=_ctx(sink))
    assert unchanged == effective
    assert [event.code for event in sink.events] == ["EDIT_IGNORED"]

    with pytest.raises(InvalidArgumentError):
        set_circle_variant(ROUND, effective, 9, SeatVariant.standard)


def test_set_circle_start_normalizes():
    effective = set_circle_count(ROUND, default_configuration(ROUND), 3)
    effective = set_circle_start(ROUND, effective, 450.0)
    assert effective.circle.start_angle_deg == 90.0


def test_shape_mismatched_edits_raise():
    with pytest.raises(InvalidArgumentError):
        increment_side(ROUND, default_configuration(ROUND), Side.top)
    with pytest.raises(InvalidArgumentError):
        set_circle_count(RECT, default_configuration(RECT), 3)

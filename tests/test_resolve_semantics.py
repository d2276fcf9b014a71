from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.seating.spec.resolve import resolve
from src.seating.spec.types import (
    CircleSeating,
    Corner,
    CornerSpec,
    EffectiveConfiguration,
    InvalidArgumentError,
    RectangleSeating,
    SeatingConfiguration,
    SeatRef,
    SeatSize,
    SeatSizing,
    SeatVariant,
    Side,
    SideSpec,
    TableGeometry,
    TableShape,
)

RECT = TableGeometry(shape=TableShape.rectangle, width=120.0, height=80.0)
ROUND = TableGeometry(shape=TableShape.circle, width=160.0, height=160.0)

STANDARD = SeatVariant.standard
STOOL = SeatVariant.bar_stool
CURVED = SeatVariant.booth_semicircular
U = SeatVariant.booth_u


def _rect_config(**parts) -> SeatingConfiguration:
    seat_sizes = parts.pop("seat_sizes", {})
    return SeatingConfiguration(rectangle=RectangleSeating(**parts), seat_sizes=seat_sizes)


def _circle_config(count: int, variants=(), start: float = 0.0, seat_sizes=None) -> SeatingConfiguration:
    return SeatingConfiguration(
        circle=CircleSeating(count=count, start_angle_deg=start, variants=tuple(variants)),
        seat_sizes=seat_sizes or {},
    )


def _reresolve(table: TableGeometry, effective: EffectiveConfiguration) -> EffectiveConfiguration:
    config = SeatingConfiguration(
        sizing=effective.sizing,
        rectangle=effective.rectangle,
        circle=effective.circle,
        seat_sizes=dict(effective.seat_sizes),
    )
    again, diagnostics = resolve(table, config)
    assert diagnostics.warnings == []
    return again


CASES = [
    (RECT, _rect_config(top=SideSpec(9), left=SideSpec(1, STOOL), tl=CornerSpec(True, CURVED))),
    (RECT, _rect_config(top=SideSpec(2, U), right=SideSpec(2), bottom=SideSpec(1, U), br=CornerSpec(True))),
    (RECT, _rect_config(bottom=SideSpec(0, STOOL), tr=CornerSpec(False, STOOL))),
    (RECT, _rect_config(top=SideSpec(3), seat_sizes={SeatRef.side_seat(Side.top, 1): SeatSize(w=60.0)})),
    (ROUND, _circle_config(36, [CURVED] + [STANDARD] * 16 + [CURVED], start=-90.0)),
    (ROUND, _circle_config(5, [CURVED, STANDARD, STANDARD, STANDARD, STANDARD])),
    (ROUND, _circle_config(12, seat_sizes={SeatRef.circle_slot(3): SeatSize(w=80.0, h=2.0)})),
]


@pytest.mark.parametrize("table,config", CASES)
def test_resolve_is_idempotent(table, config):
    effective, _ = resolve(table, config)
    assert isinstance(effective, EffectiveConfiguration)
    assert _reresolve(table, effective) == effective


def test_count_clamped_to_side_capacity():
    effective, diagnostics = resolve(RECT, _rect_config(top=SideSpec(9), left=SideSpec(5)))
    assert effective.rectangle.top.count == 3
    assert effective.rectangle.left.count == 1
    assert diagnostics.codes.count("COUNT_CLAMP") == 2


def test_u_booth_frees_adjacent_sides_and_corners():
    config = _rect_config(
        top=SideSpec(3, U),
        left=SideSpec(2),
        right=SideSpec(2),
        bottom=SideSpec(2),
        tl=CornerSpec(True),
        br=CornerSpec(True, STOOL),
    )
    effective, diagnostics = resolve(RECT, config)
    rectangle = effective.rectangle
    assert rectangle.top == SideSpec(1, U)
    assert rectangle.left == SideSpec()
    assert rectangle.right == SideSpec()
    assert rectangle.bottom == SideSpec(2, STANDARD)
    for corner in Corner:
        assert rectangle.corner(corner) == CornerSpec()
    assert "COUNT_CLAMP" in diagnostics.codes
    assert diagnostics.codes.count("SIDE_OCCUPIED") == 2
    assert diagnostics.codes.count("CORNER_OCCUPIED") == 2


def test_only_first_u_booth_survives():
    effective, diagnostics = resolve(RECT, _rect_config(top=SideSpec(1, U), bottom=SideSpec(1, U)))
    assert effective.rectangle.top == SideSpec(1, U)
    assert effective.rectangle.bottom == SideSpec(1, STANDARD)
    assert "U_BOOTH_CONFLICT" in diagnostics.codes


def test_adjacent_second_u_booth_is_cleared():
    effective, _ = resolve(RECT, _rect_config(right=SideSpec(1, U), top=SideSpec(1, U)))
    assert effective.rectangle.top == SideSpec(1, U)
    assert effective.rectangle.right == SideSpec()


def test_curved_booth_on_side_becomes_u_booth():
    effective, diagnostics = resolve(RECT, _rect_config(left=SideSpec(1, CURVED)))
    assert effective.rectangle.left == SideSpec(1, U)
    assert "VARIANT_NORMALIZED" in diagnostics.codes


def test_corner_booth_falls_back_to_standard():
    effective, diagnostics = resolve(RECT, _rect_config(tl=CornerSpec(True, U), tr=CornerSpec(True, STOOL)))
    assert effective.rectangle.tl == CornerSpec(True, STANDARD)
    assert effective.rectangle.tr == CornerSpec(True, STOOL)
    assert "CORNER_VARIANT_FALLBACK" in diagnostics.codes


def test_empty_side_and_disabled_corner_reset_variant():
    effective, diagnostics = resolve(RECT, _rect_config(bottom=SideSpec(0, STOOL), bl=CornerSpec(False, STOOL)))
    assert effective.rectangle.bottom == SideSpec()
    assert effective.rectangle.bl == CornerSpec()
    assert diagnostics.codes.count("VARIANT_RESET") == 2


def test_missing_rectangle_branch_means_no_seats():
    effective, diagnostics = resolve(RECT, SeatingConfiguration())
    assert effective.rectangle == RectangleSeating()
    assert effective.circle is None
    assert diagnostics.warnings == []


def test_sizing_raised_to_minimum():
    config = SeatingConfiguration(sizing=SeatSizing(chair_width=2.0, chair_height=10.0, chair_spacing=-3.0))
    effective, diagnostics = resolve(RECT, config)
    assert effective.sizing == SeatSizing(chair_width=4.0, chair_height=10.0, chair_spacing=0.0)
    assert diagnostics.codes.count("SIZE_CLAMP") == 2


def test_circle_count_clamped_to_capacity():
    effective, diagnostics = resolve(ROUND, _circle_config(20))
    assert effective.circle.count == 16
    assert len(effective.circle.variants) == 16
    assert "COUNT_CLAMP" in diagnostics.codes
    assert "VARIANTS_ALIGNED" in diagnostics.codes


def test_circle_with_booth_keeps_slots_within_capacity():
    variants = (CURVED, STANDARD, STANDARD, STANDARD, STANDARD)
    effective, diagnostics = resolve(ROUND, _circle_config(5, variants))
    assert effective.circle.count == 5
    assert effective.circle.variants == variants
    assert diagnostics.warnings == []


def test_circle_start_angle_normalized():
    effective, diagnostics = resolve(ROUND, _circle_config(4, start=-90.0))
    assert effective.circle.start_angle_deg == 270.0
    assert "ANGLE_NORMALIZED" in diagnostics.codes


def test_booth_closer_than_half_turn_is_demoted():
    table = TableGeometry(shape=TableShape.circle, width=400.0, height=400.0)
    variants = [STANDARD] * 36
    variants[0] = CURVED
    variants[17] = CURVED
    effective, diagnostics = resolve(table, _circle_config(36, variants))
    circle = effective.circle
    assert circle.variants[0] == CURVED
    assert circle.variant_at(17) == STANDARD
    assert sum(1 for variant in circle.variants if variant.is_booth) == 1
    assert "BOOTH_DEMOTED" in diagnostics.codes
    assert circle.count == 20


def test_opposite_booths_both_survive():
    effective, diagnostics = resolve(ROUND, _circle_config(2, [CURVED, CURVED]))
    assert effective.circle.variants == (CURVED, CURVED)
    assert "BOOTH_DEMOTED" not in diagnostics.codes


def test_booth_count_reduction_reaches_fixed_point():
    effective, _ = resolve(ROUND, _circle_config(4, [CURVED] * 4))
    assert effective.circle.count == 2
    assert effective.circle.variants == (CURVED, STANDARD)


def test_overrides_for_missing_seats_and_booths_are_dropped():
    config = _rect_config(
        top=SideSpec(3),
        bottom=SideSpec(1, U),
        seat_sizes={
            SeatRef.side_seat(Side.top, 5): SeatSize(w=20.0),
            SeatRef.side_seat(Side.bottom, 0): SeatSize(w=20.0),
            SeatRef.corner_seat(Corner.tl): SeatSize(w=20.0),
        },
    )
    effective, diagnostics = resolve(RECT, config)
    assert effective.seat_sizes == {}
    assert diagnostics.codes.count("OVERRIDE_DROPPED") == 3


def test_override_raised_to_minimum():
    config = _rect_config(top=SideSpec(1), seat_sizes={SeatRef.side_seat(Side.top, 0): SeatSize(w=1.0, h=1.0)})
    effective, diagnostics = resolve(RECT, config)
    assert effective.seat_sizes[SeatRef.side_seat(Side.top, 0)] == SeatSize(w=4.0, h=4.0)
    assert diagnostics.codes.count("SIZE_CLAMP") == 2


def test_override_width_clamped_to_neighbour_bound():
    ref = SeatRef.side_seat(Side.top, 1)
    effective, diagnostics = resolve(RECT, _rect_config(top=SideSpec(3), seat_sizes={ref: SeatSize(w=60.0, h=12.0)}))
    assert effective.seat_sizes[ref] == SeatSize(w=35.0, h=12.0)
    assert "SEAT_SIZE_CLAMP" in diagnostics.codes


def test_overrides_clamped_in_seat_order():
    first = SeatRef.side_seat(Side.top, 0)
    second = SeatRef.side_seat(Side.top, 1)
    config = _rect_config(top=SideSpec(3), seat_sizes={first: SeatSize(w=60.0), second: SeatSize(w=60.0)})
    effective, _ = resolve(RECT, config)
    assert effective.seat_sizes[first] == SeatSize(w=5.0)
    assert effective.seat_sizes[second] == SeatSize(w=35.0)


def test_corner_override_is_not_bounded():
    ref = SeatRef.corner_seat(Corner.br)
    effective, diagnostics = resolve(RECT, _rect_config(br=CornerSpec(True), seat_sizes={ref: SeatSize(w=90.0)}))
    assert effective.seat_sizes[ref] == SeatSize(w=90.0)
    assert diagnostics.warnings == []


@pytest.mark.parametrize(
    "table,config",
    [
        (None, SeatingConfiguration()),
        (TableGeometry(shape="hexagon", width=10.0, height=10.0), SeatingConfiguration()),
        (TableGeometry(shape=TableShape.rectangle, width=float("inf"), height=10.0), SeatingConfiguration()),
        (TableGeometry(shape=TableShape.rectangle, width=-5.0, height=10.0), SeatingConfiguration()),
        (RECT, None),
        (RECT, _rect_config(top=SideSpec(-1))),
        (RECT, _rect_config(top=SideSpec(1, "throne"))),
        (RECT, _circle_config(3)),
        (ROUND, _rect_config(top=SideSpec(1))),
        (ROUND, _circle_config(-2)),
        (ROUND, _circle_config(2, start=float("nan"))),
        (RECT, SeatingConfiguration(sizing=SeatSizing(chair_width=float("nan")))),
    ],
)
def test_invalid_arguments_raise(table, config):
    with pytest.raises(InvalidArgumentError):
        resolve(table, config)

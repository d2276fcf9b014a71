"""Seat capacity rules for rectangle sides and circular tables."""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Sequence, Union

from src.seating.geom_utils import ANGLE_EPS, FULL_TURN, chord_angle, packing_max_count
from src.seating.presets.catalog import GRID, MAX_CIRCLE_COUNT, MAX_SIDE_COUNT
from src.seating.spec.types import (
    InvalidArgumentError,
    SIDE_ORDER,
    SeatSizing,
    SeatVariant,
    Side,
    TableGeometry,
    TableShape,
    Whole,
)

VariantsArg = Union[SeatVariant, Sequence[SeatVariant], Mapping[Side, SeatVariant], None]


def seat_span(variant: SeatVariant, width: float, height: float) -> float:
    """Footprint a seat takes along its row."""
    if variant == SeatVariant.bar_stool:
        return max(float(width), float(height))
    return float(width)


def side_capacity(table: TableGeometry, side: Side, sizing: SeatSizing, variant: SeatVariant) -> int:
    if variant.is_booth:
        return 1
    span = seat_span(variant, sizing.chair_width, sizing.chair_height)
    count = packing_max_count(table.side_length(side), sizing.chair_spacing, span)
    return min(MAX_SIDE_COUNT, count)


def circle_capacity_units(table: TableGeometry) -> int:
    """Capacity units of a round table: diameter in grid cells, rounded to even."""
    cells = max(0.0, float(table.diameter)) / GRID
    return int(math.floor(cells / 2.0 + 0.5)) * 2


def _circle_seat_span(sizing: SeatSizing, variants: Iterable[SeatVariant]) -> float:
    spans = [
        seat_span(variant, sizing.chair_width, sizing.chair_height)
        for variant in variants
        if not variant.is_booth
    ]
    if spans:
        return max(spans)
    return seat_span(SeatVariant.standard, sizing.chair_width, sizing.chair_height)


def footprint_seat_count(radius: float, free_arc_deg: float, span: float, closed: bool) -> int:
    """Seats of ``span`` that fit on an arc while keeping a chord of at least ``span``.

    A closed ring of n seats has n gaps; an open arc of m seats has m + 1.
    """
    if radius <= 0.0 or free_arc_deg <= 0.0:
        return 0
    theta = chord_angle(radius, span)
    if closed:
        return max(0, int(math.floor(free_arc_deg / theta + ANGLE_EPS)))
    return max(0, int(math.floor(free_arc_deg / theta - 1.0 + ANGLE_EPS)))


def circle_capacity(table: TableGeometry, sizing: SeatSizing, variants: Sequence[SeatVariant] = ()) -> int:
    units = circle_capacity_units(table)
    booth_count = sum(1 for variant in variants if variant.is_booth)
    span = _circle_seat_span(sizing, variants)
    radius = float(table.diameter) / 2.0

    if booth_count == 0:
        unit_max = units
        footprint_max = footprint_seat_count(radius, FULL_TURN, span, closed=True)
    else:
        unit_max = booth_count + max(0, units - booth_count * (units // 2))
        free_arc = max(0.0, FULL_TURN - 180.0 * booth_count)
        footprint_max = booth_count + footprint_seat_count(radius, free_arc, span, closed=False)
    return max(0, min(MAX_CIRCLE_COUNT, unit_max, footprint_max))


def _variant_for_side(side: Side, variants: VariantsArg) -> SeatVariant:
    if variants is None:
        return SeatVariant.standard
    if isinstance(variants, SeatVariant):
        return variants
    if isinstance(variants, Mapping):
        return SeatVariant(variants.get(side, SeatVariant.standard))
    # Sequences are read in top, right, bottom, left order.
    ordered = list(variants)
    position = SIDE_ORDER.index(side)
    if position < len(ordered):
        return SeatVariant(ordered[position])
    return SeatVariant.standard


def compute_capacity(
    table: TableGeometry,
    target: Union[Side, Whole],
    sizing: SeatSizing,
    variants: VariantsArg = None,
) -> int:
    """Maximum seat count for one rectangle side or a whole table.

    For a rectangle ``WHOLE`` sums its four sides. For a circle ``variants`` is
    the slot-aligned variant list and ``target`` must be ``WHOLE``.
    """
    from src.seating.spec.resolve import validate_table

    validate_table(table)
    shape = TableShape(table.shape)
    if shape == TableShape.circle:
        if isinstance(target, Side):
            raise InvalidArgumentError("a circular table has no sides; use WHOLE")
        if not isinstance(target, Whole):
            raise InvalidArgumentError(f"unknown capacity target: {target!r}")
        if variants is None or isinstance(variants, Mapping):
            slot_variants: Sequence[SeatVariant] = ()
        elif isinstance(variants, SeatVariant):
            slot_variants = (variants,)
        else:
            slot_variants = tuple(SeatVariant(variant) for variant in variants)
        return circle_capacity(table, sizing, slot_variants)

    if isinstance(target, Side):
        return side_capacity(table, target, sizing, _variant_for_side(target, variants))
    if isinstance(target, Whole):
        return sum(side_capacity(table, side, sizing, _variant_for_side(side, variants)) for side in SIDE_ORDER)
    raise InvalidArgumentError(f"unknown capacity target: {target!r}")

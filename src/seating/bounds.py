"""Per-seat footprint bounds shared by the resolver and the clamp engine."""

from __future__ import annotations

from typing import Mapping, Optional

from src.seating.capacity import seat_span
from src.seating.geom_utils import (
    allocate_circle_angles,
    arc_length,
    chord_length,
    circle_seat_order,
    neighbor_width_bound,
    side_center_delta,
)
from src.seating.spec.types import (
    CircleSeating,
    SeatRef,
    SeatSize,
    SeatSizing,
    SeatVariant,
    Side,
    TableGeometry,
)

SeatSizes = Mapping[SeatRef, SeatSize]


def seat_dims(
    sizing: SeatSizing,
    seat_sizes: SeatSizes,
    ref: SeatRef,
    variant: SeatVariant,
) -> tuple[float, float]:
    """Effective (w, h) of one seat; bar stools are squared."""
    override = seat_sizes.get(ref)
    width = float(sizing.chair_width)
    height = float(sizing.chair_height)
    if override is not None:
        if override.w is not None:
            width = float(override.w)
        if override.h is not None:
            height = float(override.h)
    if variant == SeatVariant.bar_stool:
        side = max(width, height)
        return (side, side)
    return (width, height)


def side_spans(
    side: Side,
    count: int,
    variant: SeatVariant,
    sizing: SeatSizing,
    seat_sizes: SeatSizes,
) -> list[float]:
    spans = []
    for index in range(count):
        width, height = seat_dims(sizing, seat_sizes, SeatRef.side_seat(side, index), variant)
        spans.append(seat_span(variant, width, height))
    return spans


def side_width_bound(
    table: TableGeometry,
    side: Side,
    count: int,
    spacing: float,
    spans: list[float],
    index: int,
) -> Optional[float]:
    """Largest span seat ``index`` may take without touching its row neighbours."""
    if count < 2:
        return None
    delta = side_center_delta(table.side_length(side), count, spacing)
    bounds = [
        neighbor_width_bound(delta, spans[neighbor])
        for neighbor in (index - 1, index + 1)
        if 0 <= neighbor < count
    ]
    return min(bounds) if bounds else None


def circle_spans(circle: CircleSeating, sizing: SeatSizing, seat_sizes: SeatSizes) -> list[float]:
    spans = []
    for index in range(circle.count):
        variant = circle.variant_at(index)
        width, height = seat_dims(sizing, seat_sizes, SeatRef.circle_slot(index), variant)
        spans.append(seat_span(variant, width, height))
    return spans


def circle_width_bound(
    table: TableGeometry,
    circle: CircleSeating,
    spans: list[float],
    index: int,
) -> Optional[float]:
    """Bound for a circle seat: its share of the free arc and the neighbour chord rule.

    Lengths are measured at the table radius.
    """
    booth_flags = [circle.variant_at(i).is_booth for i in range(circle.count)]
    order = circle_seat_order(booth_flags)
    if index not in order:
        return None
    _, step, _ = allocate_circle_angles(circle.start_angle_deg, booth_flags)
    if step <= 0.0:
        return None
    radius = float(table.diameter) / 2.0
    bound = arc_length(radius, step)

    position = order.index(index)
    if any(booth_flags):
        neighbors = [order[p] for p in (position - 1, position + 1) if 0 <= p < len(order)]
    elif len(order) >= 2:
        neighbors = [order[(position - 1) % len(order)], order[(position + 1) % len(order)]]
    else:
        neighbors = []
    chord = chord_length(radius, step)
    for neighbor in neighbors:
        bound = min(bound, neighbor_width_bound(chord, spans[neighbor]))
    return bound

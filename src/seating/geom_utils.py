"""Shared numeric and geometry helpers for the seating engine.

Angles are degrees measured clockwise from +x in the table's local frame
(x right, y down), matching how the floor-plan canvas draws them.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

Interval = tuple[float, float]

ANGLE_EPS = 1e-9
LENGTH_EPS = 1e-9
FULL_TURN = 360.0


def is_finite_number(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def normalize_angle(deg: float) -> float:
    value = math.fmod(float(deg), FULL_TURN)
    if value < 0.0:
        value += FULL_TURN
    # fmod of a tiny negative number lands exactly on 360.0 after the shift.
    if value >= FULL_TURN:
        value = 0.0
    return value


def angular_distance(a: float, b: float) -> float:
    """Great-circle distance between two angles, in [0, 180]."""
    diff = abs(normalize_angle(a) - normalize_angle(b))
    return min(diff, FULL_TURN - diff)


def _merge_sorted(intervals: list[Interval]) -> list[Interval]:
    merged: list[Interval] = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1] + ANGLE_EPS:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def blocked_intervals(centers: Iterable[float], half_width_deg: float = 90.0) -> list[Interval]:
    """Build +/- half_width arcs around every center and merge them.

    Arcs crossing 0 degrees are split so every interval lies in [0, 360].
    """
    span = 2.0 * float(half_width_deg)
    if span <= 0.0:
        return []
    raw: list[Interval] = []
    for center in centers:
        if span >= FULL_TURN:
            return [(0.0, FULL_TURN)]
        start = normalize_angle(float(center) - float(half_width_deg))
        end = start + span
        if end > FULL_TURN:
            raw.append((start, FULL_TURN))
            raw.append((0.0, end - FULL_TURN))
        else:
            raw.append((start, end))
    return _merge_sorted(raw)


def complement_intervals(
    blocked: Sequence[Interval],
    full_range: Interval = (0.0, FULL_TURN),
) -> list[Interval]:
    """Free arcs left by ``blocked``.

    On a full circle an arc running through 0 degrees is reported once, with
    an end above 360.
    """
    lo, hi = float(full_range[0]), float(full_range[1])
    if not blocked:
        return [(lo, hi)]
    free: list[Interval] = []
    cursor = lo
    for start, end in _merge_sorted(list(blocked)):
        if start > cursor + ANGLE_EPS:
            free.append((cursor, min(start, hi)))
        cursor = max(cursor, end)
    if cursor < hi - ANGLE_EPS:
        free.append((cursor, hi))

    whole_circle = abs((hi - lo) - FULL_TURN) <= ANGLE_EPS
    if whole_circle and len(free) >= 2 and free[0][0] <= lo + ANGLE_EPS and free[-1][1] >= hi - ANGLE_EPS:
        head = free.pop(0)
        tail = free.pop()
        free.append((tail[0], head[1] + FULL_TURN))
        free.sort()
    return free


def interval_length(interval: Interval) -> float:
    return max(0.0, float(interval[1]) - float(interval[0]))


def largest_interval(intervals: Sequence[Interval]) -> Interval | None:
    best: Interval | None = None
    for interval in intervals:
        if interval_length(interval) <= ANGLE_EPS:
            continue
        if best is None or interval_length(interval) > interval_length(best) + ANGLE_EPS:
            best = interval
    return best


def packing_max_count(length: float, spacing: float, seat_span: float) -> int:
    """Largest N with N <= (length + 2*spacing) / seat_span - 1 that never grows with spacing.

    The gap scheme alone admits more seats as spacing grows, so the count is
    also held to the zero-spacing bound and to N*span + (N-1)*spacing <= length,
    which keeps the first and last seat on the side.
    """
    if seat_span <= 0.0:
        return 0
    length, spacing, seat_span = float(length), max(0.0, float(spacing)), float(seat_span)
    gaps = (length + 2.0 * spacing) / seat_span - 1.0
    unspaced = length / seat_span - 1.0
    edges = (length + spacing) / (seat_span + spacing)
    result = min(gaps, unspaced, edges)
    return max(0, int(math.floor(result + LENGTH_EPS)))


def side_step(length: float, count: int, spacing: float) -> float:
    if count <= 0:
        return 0.0
    return (float(length) - (count - 1) * float(spacing)) / (count + 1)


def side_centers(length: float, count: int, spacing: float) -> list[float]:
    """Seat center offsets measured from the start of a side."""
    step = side_step(length, count, spacing)
    return [step * i + float(spacing) * (i - 1) for i in range(1, count + 1)]


def side_center_delta(length: float, count: int, spacing: float) -> float:
    return side_step(length, count, spacing) + float(spacing)


def neighbor_width_bound(center_delta: float, neighbor_width: float) -> float:
    return 2.0 * float(center_delta) - float(neighbor_width)


def chord_length(radius: float, angle_deg: float) -> float:
    return 2.0 * float(radius) * math.sin(math.radians(abs(float(angle_deg))) / 2.0)


def arc_length(radius: float, angle_deg: float) -> float:
    return math.radians(float(angle_deg)) * float(radius)


def chord_angle(radius: float, span: float) -> float:
    """Central angle whose chord at ``radius`` equals ``span`` (180 when it cannot)."""
    if radius <= 0.0 or span >= 2.0 * radius:
        return 180.0
    return 2.0 * math.degrees(math.asin(float(span) / (2.0 * float(radius))))


def polar_point(radius: float, angle_deg: float) -> tuple[float, float]:
    rad = math.radians(float(angle_deg))
    return (float(radius) * math.cos(rad), float(radius) * math.sin(rad))


def rotate_point(
    point: tuple[float, float],
    angle_deg: float,
    origin: tuple[float, float] = (0.0, 0.0),
) -> tuple[float, float]:
    if angle_deg == 0.0:
        return (float(point[0]) + float(origin[0]), float(point[1]) + float(origin[1]))
    rad = math.radians(float(angle_deg))
    cos_a, sin_a = math.cos(rad), math.sin(rad)
    x, y = float(point[0]), float(point[1])
    return (
        float(origin[0]) + x * cos_a - y * sin_a,
        float(origin[1]) + x * sin_a + y * cos_a,
    )


def slot_angles(start_deg: float, count: int) -> list[float]:
    if count <= 0:
        return []
    return [normalize_angle(float(start_deg) + FULL_TURN * i / count) for i in range(count)]


def circle_seat_order(booth_flags: Sequence[bool]) -> list[int]:
    """Non-booth slot indices in the order they are laid along the free arc."""
    count = len(booth_flags)
    booth_indices = [i for i, flag in enumerate(booth_flags) if flag]
    if not booth_indices:
        return list(range(count))
    first_booth = booth_indices[0]
    return [
        (first_booth + offset) % count
        for offset in range(1, count)
        if not booth_flags[(first_booth + offset) % count]
    ]


def allocate_circle_angles(start_deg: float, booth_flags: Sequence[bool]) -> tuple[list[float], float, Interval | None]:
    """Return per-slot angles, the angular step between free seats and the arc used.

    Booth slots keep their nominal slot angle. Without booths every seat keeps
    its slot angle too. With booths the remaining seats are spread over the
    largest free arc using an (m+1)-gap scheme, taken cyclically starting
    after the first booth slot.
    """
    count = len(booth_flags)
    angles = slot_angles(start_deg, count)
    booth_indices = [i for i, flag in enumerate(booth_flags) if flag]
    if not booth_indices:
        return angles, (FULL_TURN / count if count else 0.0), ((0.0, FULL_TURN) if count else None)

    free_arc = largest_interval(
        complement_intervals(blocked_intervals([angles[i] for i in booth_indices]))
    )
    seat_order = circle_seat_order(booth_flags)
    if not seat_order or free_arc is None:
        return angles, 0.0, free_arc

    step = interval_length(free_arc) / (len(seat_order) + 1)
    for k, slot in enumerate(seat_order, start=1):
        angles[slot] = normalize_angle(free_arc[0] + step * k)
    return angles, step, free_arc

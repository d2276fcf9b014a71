"""Overlap checks for computed layouts."""

from __future__ import annotations

import math
from typing import Any

from src.seating.geom_utils import angular_distance, normalize_angle
from src.seating.plan_types import LayoutResult, SeatPlacement

DEFAULT_OVERLAP_EPS = 1e-6


def _distance(a: SeatPlacement, b: SeatPlacement) -> float:
    return math.hypot(a.center[0] - b.center[0], a.center[1] - b.center[1])


def _polar_angle(placement: SeatPlacement) -> float:
    return normalize_angle(math.degrees(math.atan2(placement.center[1], placement.center[0])))


def _pair_issue(a: SeatPlacement, b: SeatPlacement, eps: float) -> dict[str, Any] | None:
    required = (a.width + b.width) / 2.0
    distance = _distance(a, b)
    if distance + eps >= required:
        return None
    return {
        "code": "SEAT_OVERLAP",
        "a": a.source_ref.label(),
        "b": b.source_ref.label(),
        "distance": round(distance, 6),
        "required": round(required, 6),
    }


def _side_rows(placements: tuple[SeatPlacement, ...]) -> dict[str, list[SeatPlacement]]:
    rows: dict[str, list[SeatPlacement]] = {}
    for placement in placements:
        if placement.source_ref.kind != "side" or placement.variant.is_booth:
            continue
        rows.setdefault(placement.source_ref.key.value, []).append(placement)
    for row in rows.values():
        row.sort(key=lambda item: item.source_ref.index)
    return rows


def _circle_issues(placements: tuple[SeatPlacement, ...], eps: float) -> list[dict[str, Any]]:
    slots = [placement for placement in placements if placement.source_ref.kind == "circle"]
    booths = [placement for placement in slots if placement.variant.is_booth]
    seats = sorted(
        (placement for placement in slots if not placement.variant.is_booth),
        key=_polar_angle,
    )
    issues: list[dict[str, Any]] = []

    for booth in booths:
        booth_angle = _polar_angle(booth)
        for seat in seats:
            if angular_distance(booth_angle, _polar_angle(seat)) + eps < 90.0:
                issues.append(
                    {
                        "code": "BOOTH_OVERLAP",
                        "a": booth.source_ref.label(),
                        "b": seat.source_ref.label(),
                        "distance": round(angular_distance(booth_angle, _polar_angle(seat)), 6),
                        "required": 90.0,
                    }
                )

    pairs = list(zip(seats, seats[1:]))
    if len(seats) > 2:
        pairs.append((seats[-1], seats[0]))
    for a, b in pairs:
        issue = _pair_issue(a, b, eps)
        if issue is not None:
            issues.append(issue)
    return issues


def find_overlaps(result: LayoutResult, eps: float = DEFAULT_OVERLAP_EPS) -> list[dict[str, Any]]:
    """Report neighbouring seats whose footprints intersect.

    Seats in one side row are compared with their row neighbours; circle
    seats with their angular neighbours and with every booth body.
    """
    issues: list[dict[str, Any]] = []
    for row in _side_rows(result.placements).values():
        for a, b in zip(row, row[1:]):
            issue = _pair_issue(a, b, eps)
            if issue is not None:
                issues.append(issue)
    issues.extend(_circle_issues(result.placements, eps))
    return issues

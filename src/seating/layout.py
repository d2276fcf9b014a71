"""Layout allocation: effective configuration -> ordered seat placements.

Coordinate system: origin at the table centre, x to the right, y down, before
the table's own rotation. Rectangle placements come out in side order
top -> right -> bottom -> left, then corners tl, tr, br, bl. Circle placements
come out in ascending slot index.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from src.seating.bounds import seat_dims
from src.seating.components import build_circle, build_corners, build_side
from src.seating.diagnostics import NoopDiagnosticsSink
from src.seating.geom_utils import rotate_point
from src.seating.plan_types import LayoutResult, SeatPlacement, SeatPlan
from src.seating.spec.resolve import validate_table
from src.seating.spec.types import (
    ADJACENT_SIDES,
    CORNER_ORDER,
    SIDE_ORDER,
    CircleInputs,
    CircleSeating,
    CornerInputs,
    EffectiveConfiguration,
    InvalidArgumentError,
    RectangleSeating,
    SeatingContext,
    SeatRef,
    Side,
    SideRowInputs,
    TableGeometry,
    TableShape,
)


def compute_side_inputs(table: TableGeometry, effective: EffectiveConfiguration, side: Side) -> SideRowInputs:
    rectangle = effective.rectangle or RectangleSeating()
    spec = rectangle.side(side)
    half_extent = float(table.height) / 2.0 if side in (Side.top, Side.bottom) else float(table.width) / 2.0
    dims = tuple(
        seat_dims(effective.sizing, effective.seat_sizes, SeatRef.side_seat(side, index), spec.variant)
        for index in range(spec.count)
    )
    return SideRowInputs(
        side=side,
        count=spec.count,
        variant=spec.variant,
        side_length=table.side_length(side),
        adjacent_length=table.side_length(ADJACENT_SIDES[side][0]),
        edge_offset=half_extent,
        spacing=effective.sizing.chair_spacing,
        seat_dims=dims,
    )


def compute_corner_inputs(table: TableGeometry, effective: EffectiveConfiguration) -> CornerInputs:
    rectangle = effective.rectangle or RectangleSeating()
    corners = []
    for corner in CORNER_ORDER:
        spec = rectangle.corner(corner)
        if not spec.enabled:
            continue
        dims = seat_dims(effective.sizing, effective.seat_sizes, SeatRef.corner_seat(corner), spec.variant)
        corners.append((corner, spec.variant, dims))
    return CornerInputs(
        half_width=float(table.width) / 2.0,
        half_height=float(table.height) / 2.0,
        corners=tuple(corners),
    )


def compute_circle_inputs(table: TableGeometry, effective: EffectiveConfiguration) -> CircleInputs:
    circle = effective.circle or CircleSeating()
    variants = tuple(circle.variant_at(index) for index in range(circle.count))
    dims = tuple(
        seat_dims(effective.sizing, effective.seat_sizes, SeatRef.circle_slot(index), variant)
        for index, variant in enumerate(variants)
    )
    return CircleInputs(
        radius=float(table.diameter) / 2.0,
        start_angle_deg=circle.start_angle_deg,
        variants=variants,
        seat_dims=dims,
    )


def allocate_layout(
    table: TableGeometry,
    effective: EffectiveConfiguration,
    ctx: Optional[SeatingContext] = None,
) -> LayoutResult:
    """Compute ordered placements for a resolved configuration."""
    shape = validate_table(table)
    if not isinstance(effective, EffectiveConfiguration):
        raise InvalidArgumentError("allocate_layout expects a resolved EffectiveConfiguration")
    if ctx is None:
        ctx = SeatingContext(run_id="", debug=False, diag=NoopDiagnosticsSink())

    plan = SeatPlan(metadata={"shape": shape.value})
    if shape == TableShape.rectangle:
        for side in SIDE_ORDER:
            build_side(plan=plan, inputs=compute_side_inputs(table, effective, side), ctx=ctx)
        build_corners(plan=plan, inputs=compute_corner_inputs(table, effective), ctx=ctx)
    else:
        build_circle(plan=plan, inputs=compute_circle_inputs(table, effective), ctx=ctx)

    plan.metadata["seat_count"] = str(len(plan.placements))
    plan.metadata["booth_count"] = str(sum(1 for placement in plan.placements if placement.variant.is_booth))
    return LayoutResult(
        placements=tuple(plan.placements),
        effective=effective,
        metadata=dict(plan.metadata),
    )


def world_placements(
    result: LayoutResult,
    table: TableGeometry,
    origin: tuple[float, float] = (0.0, 0.0),
) -> tuple[SeatPlacement, ...]:
    """Rotate local placements by the table rotation and move them to ``origin``."""
    rotation = float(table.rotation)
    return tuple(
        replace(
            placement,
            center=rotate_point(placement.center, rotation, origin),
            orientation_deg=placement.orientation_deg + rotation,
        )
        for placement in result.placements
    )

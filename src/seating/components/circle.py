"""Circular table seating component.

Booth slots keep their nominal angle and wrap the table as a ring segment.
Without booths chairs keep their slot angles; with booths they are spread
across the largest free arc left by the booths.
"""

from __future__ import annotations

from collections.abc import Callable

from src.seating.diagnostics import Severity, emit_simple
from src.seating.geom_utils import allocate_circle_angles, normalize_angle, polar_point
from src.seating.plan_types import SeatPlacement
from src.seating.presets.catalog import BOOTH_RADIAL_UNITS, EDGE_CLEARANCE, GRID
from src.seating.spec.types import CircleInputs, SeatingContext, SeatRef, SeatVariant


def booth_thickness(variant: SeatVariant) -> float:
    return float(BOOTH_RADIAL_UNITS.get(variant.value, 0)) * GRID


def select_circle_strategy(inputs: CircleInputs) -> str:
    if not inputs.variants:
        return "empty"
    if any(variant.is_booth for variant in inputs.variants):
        return "free_arc"
    return "even"


def _build_circle_empty(plan, inputs: CircleInputs) -> None:
    del plan, inputs


def _place_slots(plan, inputs: CircleInputs, angles: list[float]) -> None:
    radius = inputs.radius
    for index, (variant, angle) in enumerate(zip(inputs.variants, angles)):
        if variant.is_booth:
            thickness = booth_thickness(variant)
            plan.placements.append(
                SeatPlacement(
                    center=polar_point(radius + thickness / 2.0, angle),
                    orientation_deg=normalize_angle(angle + 90.0),
                    width=2.0 * (radius + thickness),
                    height=thickness,
                    variant=variant,
                    source_ref=SeatRef.circle_slot(index),
                )
            )
            continue
        width, height = inputs.seat_dims[index]
        plan.placements.append(
            SeatPlacement(
                center=polar_point(radius + height / 2.0 + EDGE_CLEARANCE, angle),
                orientation_deg=normalize_angle(angle + 90.0),
                width=width,
                height=height,
                variant=variant,
                source_ref=SeatRef.circle_slot(index),
            )
        )


def _build_circle_even(plan, inputs: CircleInputs) -> None:
    flags = [False] * len(inputs.variants)
    angles, _, _ = allocate_circle_angles(inputs.start_angle_deg, flags)
    _place_slots(plan, inputs, angles)


def _build_circle_free_arc(plan, inputs: CircleInputs) -> None:
    flags = [variant.is_booth for variant in inputs.variants]
    angles, step, free_arc = allocate_circle_angles(inputs.start_angle_deg, flags)
    if free_arc is not None:
        plan.metadata["free_arc_deg"] = f"{free_arc[0]:.6f}:{free_arc[1]:.6f}"
        plan.metadata["free_arc_step_deg"] = f"{step:.6f}"
    _place_slots(plan, inputs, angles)


CIRCLE_STRATEGIES: dict[str, Callable] = {
    "empty": _build_circle_empty,
    "even": _build_circle_even,
    "free_arc": _build_circle_free_arc,
}


def build_circle(plan, inputs: CircleInputs, ctx: SeatingContext) -> None:
    strategy_id = select_circle_strategy(inputs)
    strategy = CIRCLE_STRATEGIES.get(strategy_id, CIRCLE_STRATEGIES["even"])
    emit_simple(
        ctx.diag,
        run_id=ctx.run_id,
        stage="layout",
        component="circle",
        code="STRATEGY_SELECTED",
        severity=Severity.INFO,
        path="circle.strategy",
        source="computed",
        reason="circle seating strategy selected",
        payload={
            "strategy": strategy_id,
            "handler": strategy.__name__.removeprefix("_build_circle_"),
            "count": len(inputs.variants),
            "booths": sum(1 for variant in inputs.variants if variant.is_booth),
        },
    )
    strategy(plan, inputs)

"""Rectangle side seating component for layout plan generation."""

from __future__ import annotations

from collections.abc import Callable

from src.seating.diagnostics import Severity, emit_simple
from src.seating.geom_utils import side_centers
from src.seating.plan_types import SeatPlacement
from src.seating.presets.catalog import BOOTH_WALL_THICKNESS, EDGE_CLEARANCE
from src.seating.spec.types import SeatingContext, SeatRef, SeatVariant, Side, SideRowInputs

SIDE_ORIENTATION_DEG: dict[Side, float] = {
    Side.top: 0.0,
    Side.right: 90.0,
    Side.bottom: 180.0,
    Side.left: 270.0,
}

# (along-side unit vector, outward normal); seats run left->right and top->bottom.
_SIDE_FRAMES: dict[Side, tuple[tuple[float, float], tuple[float, float]]] = {
    Side.top: ((1.0, 0.0), (0.0, -1.0)),
    Side.right: ((0.0, 1.0), (1.0, 0.0)),
    Side.bottom: ((1.0, 0.0), (0.0, 1.0)),
    Side.left: ((0.0, 1.0), (-1.0, 0.0)),
}


def select_side_strategy(inputs: SideRowInputs) -> str:
    if inputs.count <= 0:
        return "empty"
    if inputs.variant == SeatVariant.booth_u:
        return "booth_u"
    return "chairs"


def _build_side_empty(plan, inputs: SideRowInputs) -> None:
    del plan, inputs


def _build_side_chairs(plan, inputs: SideRowInputs) -> None:
    along, outward = _SIDE_FRAMES[inputs.side]
    half_length = inputs.side_length / 2.0
    offsets = side_centers(inputs.side_length, inputs.count, inputs.spacing)
    for index, offset in enumerate(offsets):
        width, height = inputs.seat_dims[index]
        along_pos = offset - half_length
        push = inputs.edge_offset + (height / 2.0) + EDGE_CLEARANCE
        center = (
            along[0] * along_pos + outward[0] * push,
            along[1] * along_pos + outward[1] * push,
        )
        plan.placements.append(
            SeatPlacement(
                center=center,
                orientation_deg=SIDE_ORIENTATION_DEG[inputs.side],
                width=width,
                height=height,
                variant=inputs.variant,
                source_ref=SeatRef.side_seat(inputs.side, index),
            )
        )


def _build_side_booth_u(plan, inputs: SideRowInputs) -> None:
    # The U body wraps the base side plus both adjacent sides.
    wall = BOOTH_WALL_THICKNESS
    _, outward = _SIDE_FRAMES[inputs.side]
    plan.placements.append(
        SeatPlacement(
            center=(outward[0] * wall / 2.0, outward[1] * wall / 2.0),
            orientation_deg=SIDE_ORIENTATION_DEG[inputs.side],
            width=inputs.side_length + 2.0 * wall,
            height=inputs.adjacent_length + wall,
            variant=SeatVariant.booth_u,
            source_ref=SeatRef.side_seat(inputs.side, 0),
        )
    )


SIDE_STRATEGIES: dict[str, Callable] = {
    "empty": _build_side_empty,
    "chairs": _build_side_chairs,
    "booth_u": _build_side_booth_u,
}


def build_side(plan, inputs: SideRowInputs, ctx: SeatingContext) -> None:
    strategy_id = select_side_strategy(inputs)
    strategy = SIDE_STRATEGIES.get(strategy_id, SIDE_STRATEGIES["chairs"])
    emit_simple(
        ctx.diag,
        run_id=ctx.run_id,
        stage="layout",
        component="sides",
        code="STRATEGY_SELECTED",
        severity=Severity.INFO,
        path=f"rectangle.{inputs.side.value}.strategy",
        source="computed",
        reason="side seating strategy selected",
        payload={
            "strategy": strategy_id,
            "handler": strategy.__name__.removeprefix("_build_side_"),
            "count": inputs.count,
            "variant": inputs.variant.value,
        },
    )
    strategy(plan, inputs)

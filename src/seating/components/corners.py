"""Corner seating component: one diagonal seat per enabled corner."""

from __future__ import annotations

from collections.abc import Callable

from src.seating.diagnostics import Severity, emit_simple
from src.seating.plan_types import SeatPlacement
from src.seating.presets.catalog import CORNER_CLEARANCE, GRID
from src.seating.spec.types import Corner, CornerInputs, SeatingContext, SeatRef

CORNER_ORIENTATION_DEG: dict[Corner, float] = {
    Corner.tl: -45.0,
    Corner.tr: 45.0,
    Corner.br: 135.0,
    Corner.bl: -135.0,
}

_CORNER_SIGNS: dict[Corner, tuple[float, float]] = {
    Corner.tl: (-1.0, -1.0),
    Corner.tr: (1.0, -1.0),
    Corner.br: (1.0, 1.0),
    Corner.bl: (-1.0, 1.0),
}


def corner_offset() -> float:
    return GRID / 2.0 + CORNER_CLEARANCE


def select_corners_strategy(inputs: CornerInputs) -> str:
    return "diagonal" if inputs.corners else "none"


def _build_corners_none(plan, inputs: CornerInputs) -> None:
    del plan, inputs


def _build_corners_diagonal(plan, inputs: CornerInputs) -> None:
    offset = corner_offset()
    for corner, variant, (width, height) in inputs.corners:
        sign_x, sign_y = _CORNER_SIGNS[corner]
        plan.placements.append(
            SeatPlacement(
                center=(
                    sign_x * (inputs.half_width + offset),
                    sign_y * (inputs.half_height + offset),
                ),
                orientation_deg=CORNER_ORIENTATION_DEG[corner],
                width=width,
                height=height,
                variant=variant,
                source_ref=SeatRef.corner_seat(corner),
            )
        )


CORNER_STRATEGIES: dict[str, Callable] = {
    "none": _build_corners_none,
    "diagonal": _build_corners_diagonal,
}


def build_corners(plan, inputs: CornerInputs, ctx: SeatingContext) -> None:
    strategy_id = select_corners_strategy(inputs)
    strategy = CORNER_STRATEGIES.get(strategy_id, CORNER_STRATEGIES["none"])
    emit_simple(
        ctx.diag,
        run_id=ctx.run_id,
        stage="layout",
        component="corners",
        code="STRATEGY_SELECTED",
        severity=Severity.INFO,
        path="rectangle.corners.strategy",
        source="computed",
        reason="corner seating strategy selected",
        payload={
            "strategy": strategy_id,
            "handler": strategy.__name__.removeprefix("_build_corners_"),
            "enabled": [corner.value for corner, _, _ in inputs.corners],
        },
    )
    strategy(plan, inputs)

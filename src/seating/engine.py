"""Public seating engine entry points.

Every call runs under a SeatingContext carrying a run id and the diagnostics
sink. Diagnostics are opt-in: events go to a JSONL file only when
SEATING_DIAG_JSONL is set, otherwise they are dropped.
"""

from __future__ import annotations

import os
import uuid
from typing import Optional, Union

from src.seating import capacity as capacity_mod
from src.seating import clamp as clamp_mod
from src.seating import layout as layout_mod
from src.seating.diagnostics import Severity, make_event, rebind_event
from src.seating.plan_types import LayoutResult
from src.seating.spec.resolve import resolve, validate_table
from src.seating.spec.types import (
    ClampedSize,
    EffectiveConfiguration,
    ResizeTarget,
    SeatingConfiguration,
    SeatingContext,
    SeatSizing,
    Side,
    TableGeometry,
    Whole,
)


def _debug_env_enabled() -> bool:
    # Any non-falsey DEBUG* env variable enables debug metadata in events.
    falsey = {"", "0", "false", "off", "no", "none"}
    for key, value in os.environ.items():
        if not key.startswith("DEBUG"):
            continue
        if str(value).strip().lower() not in falsey:
            return True
    return False


def _diag_sink_from_env():
    from src.seating.diagnostics import JsonlDiagnosticsSink, NoopDiagnosticsSink

    path = os.environ.get("SEATING_DIAG_JSONL", "")
    if isinstance(path, str) and path.strip():
        return JsonlDiagnosticsSink(path.strip())
    return NoopDiagnosticsSink()


def new_context() -> SeatingContext:
    return SeatingContext(
        run_id=uuid.uuid4().hex,
        debug=_debug_env_enabled(),
        diag=_diag_sink_from_env(),
    )


def compute_capacity(
    table: TableGeometry,
    target: Union[Side, Whole],
    sizing: Optional[SeatSizing] = None,
    variants=None,
    ctx: Optional[SeatingContext] = None,
) -> int:
    ctx = ctx or new_context()
    value = capacity_mod.compute_capacity(table, target, sizing or SeatSizing(), variants)
    ctx.diag.emit(
        make_event(
            run_id=ctx.run_id,
            stage="capacity",
            component="capacity",
            code="CAPACITY_COMPUTED",
            severity=Severity.INFO,
            path=f"capacity.{target.value}",
            source="computed",
            reason="capacity computed",
            resolved_value=value,
        )
    )
    return value


def resolve_configuration(
    table: TableGeometry,
    config: SeatingConfiguration,
    ctx: Optional[SeatingContext] = None,
) -> EffectiveConfiguration:
    ctx = ctx or new_context()
    effective, diagnostics = resolve(table, config)
    for event in diagnostics.warnings:
        ctx.diag.emit(rebind_event(event, ctx.run_id))
    return effective


def allocate_layout(
    table: TableGeometry,
    effective: EffectiveConfiguration,
    ctx: Optional[SeatingContext] = None,
) -> LayoutResult:
    ctx = ctx or new_context()
    shape = validate_table(table)
    ctx.diag.emit(
        make_event(
            run_id=ctx.run_id,
            stage="layout",
            component="engine",
            code="LAYOUT_START",
            severity=Severity.INFO,
            source="computed",
            reason="layout allocation start",
            resolved_value={"shape": shape, "rotation": table.rotation},
        )
    )
    result = layout_mod.allocate_layout(table, effective, ctx)
    done_value = {
        "placements_count": len(result.placements),
        "booth_count": result.metadata.get("booth_count"),
    }
    if ctx.debug:
        done_value["metadata"] = dict(result.metadata)
    ctx.diag.emit(
        make_event(
            run_id=ctx.run_id,
            stage="layout",
            component="engine",
            code="LAYOUT_DONE",
            severity=Severity.INFO,
            source="computed",
            reason="layout allocation done",
            resolved_value=done_value,
        )
    )
    return result


def plan_seating(
    table: TableGeometry,
    config: SeatingConfiguration,
    ctx: Optional[SeatingContext] = None,
) -> LayoutResult:
    """Resolve a configuration and lay it out under one run id."""
    ctx = ctx or new_context()
    effective = resolve_configuration(table, config, ctx)
    return allocate_layout(table, effective, ctx)


def clamp_resize(
    table: TableGeometry,
    effective: EffectiveConfiguration,
    target: ResizeTarget,
    proposed: float,
    ctx: Optional[SeatingContext] = None,
) -> ClampedSize:
    return clamp_mod.clamp_resize(table, effective, target, proposed, ctx=ctx or new_context())


def apply_resize(
    table: TableGeometry,
    effective: EffectiveConfiguration,
    target: ResizeTarget,
    proposed: float,
    ctx: Optional[SeatingContext] = None,
) -> tuple[EffectiveConfiguration, ClampedSize]:
    return clamp_mod.apply_resize(table, effective, target, proposed, ctx=ctx or new_context())

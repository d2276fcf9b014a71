"""Editing operations used by the seating editor.

Every operation takes the current configuration, applies one user action and
returns a freshly resolved EffectiveConfiguration. Actions the rules forbid
(a second U-booth, seats on a side wrapped by a U-booth, a booth too close to
another booth) leave the configuration unchanged and emit EDIT_IGNORED.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from src.seating.capacity import side_capacity
from src.seating.diagnostics import Severity, emit_simple
from src.seating.geom_utils import ANGLE_EPS, angular_distance, slot_angles
from src.seating.presets.catalog import MAX_CIRCLE_COUNT, MAX_SIDE_COUNT, get_preset
from src.seating.spec.resolve import resolve, validate_table
from src.seating.spec.types import (
    ADJACENT_SIDES,
    CORNER_ORDER,
    SIDE_ORDER,
    CircleSeating,
    Corner,
    CornerSpec,
    EffectiveConfiguration,
    InvalidArgumentError,
    RectangleSeating,
    SeatingConfiguration,
    SeatingContext,
    SeatSizing,
    SeatVariant,
    Side,
    SideSpec,
    TableGeometry,
    TableShape,
)


def _resolved(table: TableGeometry, config: SeatingConfiguration) -> EffectiveConfiguration:
    effective, _ = resolve(table, config)
    return effective


def _as_config(effective: SeatingConfiguration, **changes) -> SeatingConfiguration:
    values = {
        "sizing": effective.sizing,
        "rectangle": effective.rectangle,
        "circle": effective.circle,
        "seat_sizes": dict(effective.seat_sizes),
    }
    values.update(changes)
    return SeatingConfiguration(**values)


def _emit(ctx: Optional[SeatingContext], code: str, path: str, reason: str, **payload) -> None:
    if ctx is None:
        return
    emit_simple(
        ctx.diag,
        run_id=ctx.run_id,
        stage="edit",
        component="edits",
        code=code,
        severity=Severity.INFO,
        path=path,
        source="request",
        reason=reason,
        payload=payload or None,
    )


def _preset_seating(table: TableGeometry, preset_id: Optional[str]) -> dict:
    return get_preset(table.shape, preset_id).get("seating", {})


def default_configuration(
    table: TableGeometry,
    preset_id: Optional[str] = None,
    variant_id: Optional[str] = None,
) -> EffectiveConfiguration:
    """Configuration for a freshly selected table built from the defaults catalog."""
    shape = validate_table(table)
    preset = get_preset(shape.value, preset_id, variant_id)
    sizing_values = preset.get("sizing", {})
    seating = preset.get("seating", {})
    sizing = SeatSizing(
        chair_width=float(sizing_values["chair_width"]),
        chair_height=float(sizing_values["chair_height"]),
        chair_spacing=float(sizing_values["chair_spacing"]),
    )

    if shape == TableShape.rectangle:
        side_spec = SideSpec(
            count=int(seating.get("side_count", 0)),
            variant=SeatVariant(seating.get("side_variant", "standard")),
        )
        corner_spec = CornerSpec(enabled=False, variant=SeatVariant(seating.get("corner_variant", "standard")))
        rectangle = RectangleSeating(
            **{side.value: side_spec for side in SIDE_ORDER},
            **{corner.value: corner_spec for corner in CORNER_ORDER},
        )
        return _resolved(table, SeatingConfiguration(sizing=sizing, rectangle=rectangle))

    count = int(seating.get("circle_count", 0))
    circle = CircleSeating(
        count=count,
        start_angle_deg=float(seating.get("circle_start_deg", 0.0)),
        variants=(SeatVariant(seating.get("circle_variant", "standard")),) * count,
    )
    return _resolved(table, SeatingConfiguration(sizing=sizing, circle=circle))


def _rectangle(effective: SeatingConfiguration) -> RectangleSeating:
    if effective.rectangle is None:
        raise InvalidArgumentError("side and corner edits need a rectangle configuration")
    return effective.rectangle


def _circle(effective: SeatingConfiguration) -> CircleSeating:
    if effective.circle is None:
        raise InvalidArgumentError("circle edits need a circle configuration")
    return effective.circle


def _side_blocked(rectangle: RectangleSeating, side: Side) -> bool:
    active = rectangle.active_u_side()
    return active is not None and side in ADJACENT_SIDES[active]


def increment_side(
    table: TableGeometry,
    effective: SeatingConfiguration,
    side: Side,
    preset_id: Optional[str] = None,
    ctx: Optional[SeatingContext] = None,
) -> EffectiveConfiguration:
    validate_table(table)
    rectangle = _rectangle(effective)
    spec = rectangle.side(side)
    if _side_blocked(rectangle, side) or spec.variant.is_booth:
        _emit(ctx, "EDIT_IGNORED", f"rectangle.{side.value}.count", "side is occupied by a booth")
        return _resolved(table, effective)

    variant = spec.variant
    if spec.count == 0:
        variant = SeatVariant(_preset_seating(table, preset_id).get("side_variant", "standard"))
        if variant.is_booth:
            variant = SeatVariant.standard
    limit = min(MAX_SIDE_COUNT, side_capacity(table, side, effective.sizing, variant))
    count = min(spec.count + 1, limit)
    if count == spec.count:
        _emit(ctx, "EDIT_IGNORED", f"rectangle.{side.value}.count", "side is at capacity", capacity=limit)
        return _resolved(table, effective)

    _emit(ctx, "EDIT_APPLIED", f"rectangle.{side.value}.count", "seat added", count=count)
    updated = rectangle.with_side(side, SideSpec(count=count, variant=variant))
    return _resolved(table, _as_config(effective, rectangle=updated))


def decrement_side(
    table: TableGeometry,
    effective: SeatingConfiguration,
    side: Side,
    ctx: Optional[SeatingContext] = None,
) -> EffectiveConfiguration:
    validate_table(table)
    rectangle = _rectangle(effective)
    spec = rectangle.side(side)
    if spec.count == 0:
        return _resolved(table, effective)
    _emit(ctx, "EDIT_APPLIED", f"rectangle.{side.value}.count", "seat removed", count=spec.count - 1)
    updated = rectangle.with_side(side, replace(spec, count=spec.count - 1))
    return _resolved(table, _as_config(effective, rectangle=updated))


def set_side_variant(
    table: TableGeometry,
    effective: SeatingConfiguration,
    side: Side,
    variant: SeatVariant,
    ctx: Optional[SeatingContext] = None,
) -> EffectiveConfiguration:
    validate_table(table)
    rectangle = _rectangle(effective)
    variant = SeatVariant(variant)
    if variant == SeatVariant.booth_semicircular:
        variant = SeatVariant.booth_u
    spec = rectangle.side(side)

    if variant == SeatVariant.booth_u:
        active = rectangle.active_u_side()
        if active is not None and active != side:
            _emit(ctx, "EDIT_IGNORED", f"rectangle.{side.value}.variant", f"U-booth already on {active.value}")
            return _resolved(table, effective)
        if _side_blocked(rectangle, side):
            _emit(ctx, "EDIT_IGNORED", f"rectangle.{side.value}.variant", "side is covered by a U-booth")
            return _resolved(table, effective)
        spec = SideSpec(count=1, variant=variant)
    else:
        spec = replace(spec, variant=variant)

    _emit(ctx, "EDIT_APPLIED", f"rectangle.{side.value}.variant", "side variant changed", variant=variant)
    return _resolved(table, _as_config(effective, rectangle=rectangle.with_side(side, spec)))


def set_corner(
    table: TableGeometry,
    effective: SeatingConfiguration,
    corner: Corner,
    enabled: bool,
    variant: Optional[SeatVariant] = None,
    ctx: Optional[SeatingContext] = None,
) -> EffectiveConfiguration:
    validate_table(table)
    rectangle = _rectangle(effective)
    if enabled and rectangle.active_u_side() is not None:
        _emit(ctx, "EDIT_IGNORED", f"rectangle.corner_{corner.value}", "corners are covered by a U-booth")
        return _resolved(table, effective)
    current = rectangle.corner(corner)
    spec = CornerSpec(enabled=bool(enabled), variant=SeatVariant(variant) if variant is not None else current.variant)
    _emit(ctx, "EDIT_APPLIED", f"rectangle.corner_{corner.value}", "corner changed", enabled=spec.enabled)
    return _resolved(table, _as_config(effective, rectangle=rectangle.with_corner(corner, spec)))


def set_circle_count(
    table: TableGeometry,
    effective: SeatingConfiguration,
    count: int,
    preset_id: Optional[str] = None,
    ctx: Optional[SeatingContext] = None,
) -> EffectiveConfiguration:
    validate_table(table)
    circle = _circle(effective)
    if int(count) < 0:
        raise InvalidArgumentError(f"circle count must be non-negative, got {count}")
    count = min(int(count), MAX_CIRCLE_COUNT)
    fill = SeatVariant(_preset_seating(table, preset_id).get("circle_variant", "standard"))
    variants = list(circle.variants[:count])
    variants.extend([fill] * (count - len(variants)))
    _emit(ctx, "EDIT_APPLIED", "circle.count", "circle slot count changed", count=count)
    updated = replace(circle, count=count, variants=tuple(variants))
    return _resolved(table, _as_config(effective, circle=updated))


def set_circle_variant(
    table: TableGeometry,
    effective: SeatingConfiguration,
    index: int,
    variant: SeatVariant,
    ctx: Optional[SeatingContext] = None,
) -> EffectiveConfiguration:
    validate_table(table)
    circle = _circle(effective)
    if not 0 <= index < circle.count:
        raise InvalidArgumentError(f"no circle slot {index} (count {circle.count})")
    variant = SeatVariant(variant)

    if variant.is_booth:
        angles = slot_angles(circle.start_angle_deg, circle.count)
        for other in range(circle.count):
            if other == index or not circle.variant_at(other).is_booth:
                continue
            if angular_distance(angles[index], angles[other]) < 180.0 - ANGLE_EPS:
                _emit(ctx, "EDIT_IGNORED", f"circle.variants[{index}]", f"booth at slot {other} is too close")
                return _resolved(table, effective)

    variants = [circle.variant_at(i) for i in range(circle.count)]
    variants[index] = variant
    _emit(ctx, "EDIT_APPLIED", f"circle.variants[{index}]", "slot variant changed", variant=variant)
    updated = replace(circle, variants=tuple(variants))
    return _resolved(table, _as_config(effective, circle=updated))


def set_circle_start(
    table: TableGeometry,
    effective: SeatingConfiguration,
    start_angle_deg: float,
    ctx: Optional[SeatingContext] = None,
) -> EffectiveConfiguration:
    validate_table(table)
    circle = _circle(effective)
    _emit(ctx, "EDIT_APPLIED", "circle.start_angle_deg", "start angle changed", start=start_angle_deg)
    updated = replace(circle, start_angle_deg=float(start_angle_deg))
    return _resolved(table, _as_config(effective, circle=updated))

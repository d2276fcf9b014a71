"""Resize clamping: bound proposed seat sizes so a resize never creates overlap."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from src.seating.bounds import (
    circle_spans,
    circle_width_bound,
    seat_dims,
    side_spans,
    side_width_bound,
)
from src.seating.capacity import circle_capacity, side_capacity
from src.seating.diagnostics import Severity, emit_simple
from src.seating.geom_utils import (
    LENGTH_EPS,
    allocate_circle_angles,
    chord_length,
    circle_seat_order,
    is_finite_number,
    side_center_delta,
)
from src.seating.presets.catalog import MIN_SEAT_SIZE
from src.seating.spec.resolve import resolve, validate_table
from src.seating.spec.types import (
    CORNER_ORDER,
    SIDE_ORDER,
    ClampedSize,
    EffectiveConfiguration,
    InvalidArgumentError,
    ResizeTarget,
    SeatingConfiguration,
    SeatingContext,
    SeatRef,
    SeatSize,
    SeatSizing,
    SeatVariant,
    Side,
    TableGeometry,
)

_SIZING_FIELDS = {
    "width": "chair_width",
    "height": "chair_height",
    "spacing": "chair_spacing",
}


def _minimum_for(dimension: str) -> float:
    return 0.0 if dimension == "spacing" else MIN_SEAT_SIZE


def _rectangle_fits(table: TableGeometry, effective: EffectiveConfiguration, sizing: SeatSizing) -> bool:
    rectangle = effective.rectangle
    if rectangle is None:
        return True
    for side in SIDE_ORDER:
        spec = rectangle.side(side)
        if spec.count == 0 or spec.variant.is_booth:
            continue
        if spec.count > side_capacity(table, side, sizing, spec.variant):
            return False
        spans = side_spans(side, spec.count, spec.variant, sizing, effective.seat_sizes)
        delta = side_center_delta(table.side_length(side), spec.count, sizing.chair_spacing)
        for index in range(spec.count - 1):
            if spans[index] + spans[index + 1] > 2.0 * delta + LENGTH_EPS:
                return False
    return True


def _circle_fits(table: TableGeometry, effective: EffectiveConfiguration, sizing: SeatSizing) -> bool:
    circle = effective.circle
    if circle is None or circle.count == 0:
        return True
    variants = [circle.variant_at(index) for index in range(circle.count)]
    if circle.count > circle_capacity(table, sizing, variants):
        return False
    flags = [variant.is_booth for variant in variants]
    order = circle_seat_order(flags)
    _, step, _ = allocate_circle_angles(circle.start_angle_deg, flags)
    chord = chord_length(float(table.diameter) / 2.0, step)
    spans = circle_spans(circle, sizing, effective.seat_sizes)
    pairs = list(zip(order, order[1:]))
    if not any(flags) and len(order) > 2:
        pairs.append((order[-1], order[0]))
    for first, second in pairs:
        if spans[first] + spans[second] > 2.0 * chord + LENGTH_EPS:
            return False
    return True


def _clamp_global(
    table: TableGeometry,
    effective: EffectiveConfiguration,
    dimension: str,
    proposed: float,
) -> ClampedSize:
    field_name = _SIZING_FIELDS[dimension]
    current = float(getattr(effective.sizing, field_name))
    value = max(_minimum_for(dimension), float(proposed))
    if value <= current + LENGTH_EPS:
        return ClampedSize(requested=float(proposed), value=value, bound=None)

    candidate = replace(effective.sizing, **{field_name: value})
    if _rectangle_fits(table, effective, candidate) and _circle_fits(table, effective, candidate):
        return ClampedSize(requested=float(proposed), value=value, bound=None)
    # An increase that would break any row is rejected as a whole.
    return ClampedSize(requested=float(proposed), value=current, bound=current)


def seat_variant(effective: EffectiveConfiguration, ref: SeatRef) -> SeatVariant:
    """Variant of an existing seat; raises for references to missing seats."""
    if ref.kind == "side" and effective.rectangle is not None and isinstance(ref.key, Side):
        spec = effective.rectangle.side(ref.key)
        if 0 <= ref.index < spec.count:
            return spec.variant
    elif ref.kind == "corner" and effective.rectangle is not None and ref.key in CORNER_ORDER:
        spec = effective.rectangle.corner(ref.key)
        if spec.enabled:
            return spec.variant
    elif ref.kind == "circle" and effective.circle is not None:
        if 0 <= ref.index < effective.circle.count:
            return effective.circle.variant_at(ref.index)
    raise InvalidArgumentError(f"no seat at {ref.label()}")


def _seat_bound(
    table: TableGeometry,
    effective: EffectiveConfiguration,
    ref: SeatRef,
    variant: SeatVariant,
    dimension: str,
) -> Optional[float]:
    if ref.kind == "corner":
        return None
    if dimension == "height" and variant != SeatVariant.bar_stool:
        return None
    if ref.kind == "side" and effective.rectangle is not None:
        spec = effective.rectangle.side(ref.key)
        spans = side_spans(ref.key, spec.count, spec.variant, effective.sizing, effective.seat_sizes)
        return side_width_bound(table, ref.key, spec.count, effective.sizing.chair_spacing, spans, ref.index)
    if ref.kind == "circle" and effective.circle is not None:
        spans = circle_spans(effective.circle, effective.sizing, effective.seat_sizes)
        return circle_width_bound(table, effective.circle, spans, ref.index)
    return None


def _clamp_seat(
    table: TableGeometry,
    effective: EffectiveConfiguration,
    ref: SeatRef,
    dimension: str,
    proposed: float,
) -> ClampedSize:
    if dimension == "spacing":
        raise InvalidArgumentError("spacing applies to the whole table, not to one seat")
    variant = seat_variant(effective, ref)
    width, height = seat_dims(effective.sizing, effective.seat_sizes, ref, variant)
    current = width if dimension == "width" else height
    if variant.is_booth:
        return ClampedSize(requested=float(proposed), value=current, bound=current)

    bound = _seat_bound(table, effective, ref, variant, dimension)
    limited = float(proposed) if bound is None else min(float(proposed), bound)
    return ClampedSize(requested=float(proposed), value=max(MIN_SEAT_SIZE, limited), bound=bound)


def clamp_resize(
    table: TableGeometry,
    effective: EffectiveConfiguration,
    target: ResizeTarget,
    proposed: float,
    ctx: Optional[SeatingContext] = None,
) -> ClampedSize:
    """Return the largest safe value for a proposed seat size change."""
    validate_table(table)
    if not isinstance(effective, EffectiveConfiguration):
        raise InvalidArgumentError("clamp_resize expects a resolved EffectiveConfiguration")
    if not isinstance(target, ResizeTarget):
        raise InvalidArgumentError(f"expected ResizeTarget, got {type(target).__name__}")
    if target.dimension not in _SIZING_FIELDS:
        raise InvalidArgumentError(f"unknown resize dimension: {target.dimension!r}")
    if not is_finite_number(proposed):
        raise InvalidArgumentError(f"proposed size must be a finite number, got {proposed!r}")

    if target.is_global:
        clamped = _clamp_global(table, effective, target.dimension, proposed)
    else:
        clamped = _clamp_seat(table, effective, target.ref, target.dimension, proposed)

    # Neighbours leave less than the minimum seat size: the seat stays at the
    # minimum and still overlaps.
    crowded = (
        not target.is_global
        and clamped.bound is not None
        and clamped.bound < MIN_SEAT_SIZE - LENGTH_EPS
    )
    if ctx is not None and (crowded or not clamped.accepted):
        scope = "sizing" if target.is_global else target.ref.label()
        emit_simple(
            ctx.diag,
            run_id=ctx.run_id,
            stage="clamp",
            component="clamp",
            code="RESIZE_CLAMPED",
            severity=Severity.WARN if crowded else Severity.INFO,
            path=f"{scope}.{target.dimension}",
            source="computed",
            reason=(
                "seat held at the minimum size still overlaps its neighbours"
                if crowded
                else "proposed size limited to avoid overlap"
            ),
            input_value=clamped.requested,
            resolved_value=clamped.value,
            bound=clamped.bound,
        )
    return clamped


def _with_seat_size(
    effective: EffectiveConfiguration,
    ref: SeatRef,
    variant: SeatVariant,
    dimension: str,
    value: float,
) -> dict[SeatRef, SeatSize]:
    seat_sizes = dict(effective.seat_sizes)
    current = seat_sizes.get(ref, SeatSize())
    if variant == SeatVariant.bar_stool:
        seat_sizes[ref] = SeatSize(w=value, h=value)
    elif dimension == "width":
        seat_sizes[ref] = replace(current, w=value)
    else:
        seat_sizes[ref] = replace(current, h=value)
    return seat_sizes


def apply_resize(
    table: TableGeometry,
    effective: EffectiveConfiguration,
    target: ResizeTarget,
    proposed: float,
    ctx: Optional[SeatingContext] = None,
) -> tuple[EffectiveConfiguration, ClampedSize]:
    """Clamp, write the value into the configuration and re-resolve it."""
    clamped = clamp_resize(table, effective, target, proposed, ctx=ctx)
    if target.is_global:
        sizing = replace(effective.sizing, **{_SIZING_FIELDS[target.dimension]: clamped.value})
        config = SeatingConfiguration(
            sizing=sizing,
            rectangle=effective.rectangle,
            circle=effective.circle,
            seat_sizes=dict(effective.seat_sizes),
        )
    else:
        variant = seat_variant(effective, target.ref)
        if variant.is_booth:
            return effective, clamped
        config = SeatingConfiguration(
            sizing=effective.sizing,
            rectangle=effective.rectangle,
            circle=effective.circle,
            seat_sizes=_with_seat_size(effective, target.ref, variant, target.dimension, clamped.value),
        )
    resolved, _ = resolve(table, config)
    return resolved, clamped

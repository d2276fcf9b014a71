"""Wrappers between stored chair guides and the seating engine."""

from __future__ import annotations

from typing import Dict, Optional

from src.schema import ChairGuides, SeatSizeModel, TableRequest
from src.seating import engine
from src.seating.plan_types import LayoutResult
from src.seating.presets.catalog import get_preset
from src.seating.spec.types import (
    CORNER_ORDER,
    SIDE_ORDER,
    CircleSeating,
    Corner,
    CornerSpec,
    EffectiveConfiguration,
    RectangleSeating,
    SeatingConfiguration,
    SeatingContext,
    SeatRef,
    SeatSize,
    SeatSizing,
    SeatVariant,
    Side,
    SideSpec,
    TableGeometry,
    TableShape,
)

# Side -> (count field, variant field, per-seat sizes field)
SIDE_FIELDS: Dict[Side, tuple[str, str, str]] = {
    Side.top: ("top", "top_variant", "top_seat_sizes"),
    Side.right: ("right", "right_variant", "right_seat_sizes"),
    Side.bottom: ("bottom", "bottom_variant", "bottom_seat_sizes"),
    Side.left: ("left", "left_variant", "left_seat_sizes"),
}

# Corner -> (enabled field, variant field, width field, height field)
CORNER_FIELDS: Dict[Corner, tuple[str, str, str, str]] = {
    corner: (
        f"corner_{corner.value}",
        f"corner_{corner.value}_variant",
        f"corner_{corner.value}_width_px",
        f"corner_{corner.value}_height_px",
    )
    for corner in CORNER_ORDER
}


def table_geometry(request: TableRequest) -> TableGeometry:
    return TableGeometry(
        shape=TableShape(request.type.value),
        width=float(request.width),
        height=float(request.height),
        rotation=float(request.rotation),
    )


def _seat_size(model: Optional[SeatSizeModel]) -> Optional[SeatSize]:
    if model is None or (model.w is None and model.h is None):
        return None
    return SeatSize(w=model.w, h=model.h)


def guides_to_configuration(
    guides: ChairGuides,
    shape: TableShape,
    preset_id: Optional[str] = None,
) -> SeatingConfiguration:
    """Stored guides -> engine configuration; gaps are filled from the defaults catalog."""
    preset = get_preset(shape.value, preset_id)
    sizing_defaults = preset.get("sizing", {})
    seating_defaults = preset.get("seating", {})
    sizing = SeatSizing(
        chair_width=float(guides.chair_width_px if guides.chair_width_px is not None else sizing_defaults["chair_width"]),
        chair_height=float(guides.chair_height_px if guides.chair_height_px is not None else sizing_defaults["chair_height"]),
        chair_spacing=float(
            guides.chair_spacing_px if guides.chair_spacing_px is not None else sizing_defaults["chair_spacing"]
        ),
    )
    seat_sizes: dict[SeatRef, SeatSize] = {}

    if shape == TableShape.rectangle:
        parts: dict[str, object] = {}
        for side, (count_field, variant_field, sizes_field) in SIDE_FIELDS.items():
            count = getattr(guides, count_field) or 0
            variant = getattr(guides, variant_field) or "standard"
            parts[side.value] = SideSpec(count=int(count), variant=SeatVariant(variant))
            for index, model in enumerate(getattr(guides, sizes_field) or []):
                size = _seat_size(model)
                if size is not None:
                    seat_sizes[SeatRef.side_seat(side, index)] = size
        for corner, (enabled_field, variant_field, width_field, height_field) in CORNER_FIELDS.items():
            variant = getattr(guides, variant_field) or seating_defaults.get("corner_variant", "standard")
            parts[corner.value] = CornerSpec(
                enabled=bool(getattr(guides, enabled_field)),
                variant=SeatVariant(variant),
            )
            width, height = getattr(guides, width_field), getattr(guides, height_field)
            if width is not None or height is not None:
                seat_sizes[SeatRef.corner_seat(corner)] = SeatSize(w=width, h=height)
        return SeatingConfiguration(sizing=sizing, rectangle=RectangleSeating(**parts), seat_sizes=seat_sizes)

    count = int(guides.circle_count or 0)
    base_variant = guides.circle_variant or seating_defaults.get("circle_variant", "standard")
    stored = guides.circle_variants or []
    variants = tuple(
        SeatVariant(stored[index] if index < len(stored) and stored[index] else base_variant)
        for index in range(count)
    )
    for index, model in enumerate(guides.circle_seat_sizes or []):
        size = _seat_size(model)
        if size is not None:
            seat_sizes[SeatRef.circle_slot(index)] = size
    start = guides.circle_start_deg
    if start is None:
        start = float(seating_defaults.get("circle_start_deg", 0.0))
    circle = CircleSeating(count=count, start_angle_deg=float(start), variants=variants)
    return SeatingConfiguration(sizing=sizing, circle=circle, seat_sizes=seat_sizes)


def _size_list(effective: EffectiveConfiguration, refs: list[SeatRef]) -> Optional[list[Optional[SeatSizeModel]]]:
    if not any(ref in effective.seat_sizes for ref in refs):
        return None
    sizes: list[Optional[SeatSizeModel]] = []
    for ref in refs:
        size = effective.seat_sizes.get(ref)
        sizes.append(None if size is None else SeatSizeModel(w=size.w, h=size.h))
    return sizes


def configuration_to_guides(effective: EffectiveConfiguration) -> ChairGuides:
    """Effective configuration -> guides in the stored layout."""
    values: dict[str, object] = {
        "chair_width_px": effective.sizing.chair_width,
        "chair_height_px": effective.sizing.chair_height,
        "chair_spacing_px": effective.sizing.chair_spacing,
    }
    if effective.rectangle is not None:
        rectangle = effective.rectangle
        for side in SIDE_ORDER:
            count_field, variant_field, sizes_field = SIDE_FIELDS[side]
            spec = rectangle.side(side)
            values[count_field] = spec.count
            values[variant_field] = spec.variant.value
            refs = [SeatRef.side_seat(side, index) for index in range(spec.count)]
            values[sizes_field] = _size_list(effective, refs)
        for corner in CORNER_ORDER:
            enabled_field, variant_field, width_field, height_field = CORNER_FIELDS[corner]
            spec = rectangle.corner(corner)
            values[enabled_field] = spec.enabled
            values[variant_field] = spec.variant.value
            size = effective.seat_sizes.get(SeatRef.corner_seat(corner))
            if size is not None:
                values[width_field] = size.w
                values[height_field] = size.h

    if effective.circle is not None:
        circle = effective.circle
        variants = [circle.variant_at(index).value for index in range(circle.count)]
        values["circle_count"] = circle.count
        values["circle_start_deg"] = circle.start_angle_deg
        values["circle_variant"] = variants[0] if variants and len(set(variants)) == 1 else "standard"
        values["circle_variants"] = variants
        refs = [SeatRef.circle_slot(index) for index in range(circle.count)]
        values["circle_seat_sizes"] = _size_list(effective, refs)

    return ChairGuides(**values)


def resolve_table_request(
    request: TableRequest,
    ctx: Optional[SeatingContext] = None,
) -> tuple[TableGeometry, EffectiveConfiguration]:
    """Resolve a stored table into its geometry and effective configuration."""
    table = table_geometry(request)
    config = guides_to_configuration(request.chair_guides, table.shape, preset_id=request.preset_id)
    return table, engine.resolve_configuration(table, config, ctx)


def plan_table_request(request: TableRequest, ctx: Optional[SeatingContext] = None) -> LayoutResult:
    ctx = ctx or engine.new_context()
    table, effective = resolve_table_request(request, ctx)
    return engine.allocate_layout(table, effective, ctx)


def resolve_request_to_guides(request: TableRequest) -> Dict:
    """Resolve a stored table and return its guides as stored JSON."""
    _, effective = resolve_table_request(request)
    return configuration_to_guides(effective).model_dump(by_alias=True, exclude_none=True)

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional
from typing_extensions import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =========================
# Enums / core types
# =========================

class TableType(str, Enum):
    rectangle = "rectangle"
    circle = "circle"


VariantName = Literal["standard", "barstool", "boothCurved", "boothU"]


# =========================
# Aliases / Canonicalization
# =========================

def _canon(s: str) -> str:
    s = re.sub(r"([a-z])([A-Z])", r"\1 \2", s.strip())
    s = s.lower()
    s = s.replace("-", " ")
    s = s.replace("_", " ")
    s = re.sub(r"\s+", " ", s)
    return s


TABLE_TYPE_ALIASES = {
    "rectangle": "rectangle",
    "rect": "rectangle",
    "square": "rectangle",
    "circle": "circle",
    "round": "circle",
}

# "booth" is the historic name; its meaning depends on where it is stored.
VARIANT_ALIASES = {
    "standard": "standard",
    "chair": "standard",
    "barstool": "barstool",
    "bar stool": "barstool",
    "stool": "barstool",
    "boothcurved": "boothCurved",
    "booth curved": "boothCurved",
    "curved booth": "boothCurved",
    "semicircular": "boothCurved",
    "boothu": "boothU",
    "booth u": "boothU",
    "u booth": "boothU",
}

LEGACY_BOOTH = {
    "side": "boothU",
    "corner": "standard",
    "circle": "boothCurved",
}


def _canon_variant(v, context: str):
    if v is None or not isinstance(v, str):
        return v
    canonical = _canon(v)
    if canonical == "booth":
        return LEGACY_BOOTH[context]
    return VARIANT_ALIASES.get(canonical, VARIANT_ALIASES.get(canonical.replace(" ", ""), v))


# =========================
# Stored chair guides
# =========================

class SeatSizeModel(BaseModel):
    w: Optional[float] = Field(default=None, allow_inf_nan=False)
    h: Optional[float] = Field(default=None, allow_inf_nan=False)


class ChairGuides(BaseModel):
    """
    Seating guides as stored on a table (camelCase JSON).
    Everything is optional; missing values fall back to catalog defaults.
    """

    model_config = ConfigDict(populate_by_name=True)

    top: Optional[int] = Field(default=None, ge=0)
    right: Optional[int] = Field(default=None, ge=0)
    bottom: Optional[int] = Field(default=None, ge=0)
    left: Optional[int] = Field(default=None, ge=0)

    top_variant: Optional[VariantName] = Field(default=None, alias="topVariant")
    right_variant: Optional[VariantName] = Field(default=None, alias="rightVariant")
    bottom_variant: Optional[VariantName] = Field(default=None, alias="bottomVariant")
    left_variant: Optional[VariantName] = Field(default=None, alias="leftVariant")

    corner_tl: Optional[bool] = Field(default=None, alias="cornerTL")
    corner_tr: Optional[bool] = Field(default=None, alias="cornerTR")
    corner_br: Optional[bool] = Field(default=None, alias="cornerBR")
    corner_bl: Optional[bool] = Field(default=None, alias="cornerBL")

    corner_tl_variant: Optional[VariantName] = Field(default=None, alias="cornerTLVariant")
    corner_tr_variant: Optional[VariantName] = Field(default=None, alias="cornerTRVariant")
    corner_br_variant: Optional[VariantName] = Field(default=None, alias="cornerBRVariant")
    corner_bl_variant: Optional[VariantName] = Field(default=None, alias="cornerBLVariant")

    circle_count: Optional[int] = Field(default=None, ge=0, alias="circleCount")
    circle_start_deg: Optional[float] = Field(default=None, allow_inf_nan=False, alias="circleStartDeg")
    circle_variant: Optional[VariantName] = Field(default=None, alias="circleVariant")
    circle_variants: Optional[List[VariantName]] = Field(default=None, alias="circleVariants")

    chair_width_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="chairWidthPx")
    chair_height_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="chairHeightPx")
    chair_spacing_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="chairSpacingPx")

    top_seat_sizes: Optional[List[Optional[SeatSizeModel]]] = Field(default=None, alias="topSeatSizes")
    right_seat_sizes: Optional[List[Optional[SeatSizeModel]]] = Field(default=None, alias="rightSeatSizes")
    bottom_seat_sizes: Optional[List[Optional[SeatSizeModel]]] = Field(default=None, alias="bottomSeatSizes")
    left_seat_sizes: Optional[List[Optional[SeatSizeModel]]] = Field(default=None, alias="leftSeatSizes")
    circle_seat_sizes: Optional[List[Optional[SeatSizeModel]]] = Field(default=None, alias="circleSeatSizes")

    corner_tl_width_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="cornerTLWidthPx")
    corner_tl_height_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="cornerTLHeightPx")
    corner_tr_width_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="cornerTRWidthPx")
    corner_tr_height_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="cornerTRHeightPx")
    corner_br_width_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="cornerBRWidthPx")
    corner_br_height_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="cornerBRHeightPx")
    corner_bl_width_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="cornerBLWidthPx")
    corner_bl_height_px: Optional[float] = Field(default=None, allow_inf_nan=False, alias="cornerBLHeightPx")

    # --- Alias validators (before literal parsing) ---

    @field_validator("top_variant", "right_variant", "bottom_variant", "left_variant", mode="before")
    @classmethod
    def _v_side_variant(cls, v):
        return _canon_variant(v, "side")

    @field_validator(
        "corner_tl_variant", "corner_tr_variant", "corner_br_variant", "corner_bl_variant", mode="before"
    )
    @classmethod
    def _v_corner_variant(cls, v):
        return _canon_variant(v, "corner")

    @field_validator("circle_variant", mode="before")
    @classmethod
    def _v_circle_variant(cls, v):
        return _canon_variant(v, "circle")

    @field_validator("circle_variants", mode="before")
    @classmethod
    def _v_circle_variants(cls, v):
        if not isinstance(v, list):
            return v
        return [_canon_variant(item, "circle") for item in v]

    # --- Structural validators ---

    @field_validator("circle_start_deg")
    @classmethod
    def _v_circle_start(cls, v: Optional[float]):
        if v is None:
            return None
        return ((v % 360.0) + 360.0) % 360.0


class TableRequest(BaseModel):
    """
    A stored table with its seating guides.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    type: TableType
    width: float = Field(ge=0, allow_inf_nan=False)
    height: float = Field(ge=0, allow_inf_nan=False)
    rotation: float = Field(default=0.0, allow_inf_nan=False)
    chair_guides: ChairGuides = Field(default_factory=ChairGuides, alias="chairGuides")
    preset_id: Optional[str] = Field(default=None, alias="presetId")

    @field_validator("type", mode="before")
    @classmethod
    def _v_type(cls, v):
        if v is None:
            return v
        return TABLE_TYPE_ALIASES.get(_canon(str(v)), v)

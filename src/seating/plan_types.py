"""Placement result dataclasses shared by the allocator and components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from src.seating.spec.types import EffectiveConfiguration, SeatRef, SeatVariant


@dataclass(frozen=True)
class SeatPlacement:
    """One chair, stool or booth body in the table's local frame."""

    center: Tuple[float, float]
    orientation_deg: float
    width: float
    height: float
    variant: SeatVariant
    source_ref: SeatRef


@dataclass
class SeatPlan:
    """Mutable accumulator the layout components append to."""

    placements: List[SeatPlacement] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LayoutResult:
    placements: Tuple[SeatPlacement, ...]
    effective: EffectiveConfiguration
    metadata: Dict[str, str] = field(default_factory=dict, compare=False)

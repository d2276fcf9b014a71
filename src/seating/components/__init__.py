"""Seating layout components."""

from src.seating.components.circle import build_circle
from src.seating.components.corners import build_corners
from src.seating.components.sides import build_side

__all__ = [
    "build_circle",
    "build_corners",
    "build_side",
]

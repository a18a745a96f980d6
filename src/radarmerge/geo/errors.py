"""Exceptions raised by the geometry layer."""
from __future__ import annotations


class GeometryError(Exception):
    """Invalid geometric input or a failure inside the clipping engine."""


class RegionClassificationError(GeometryError):
    """Clipped contours that cannot be arranged into outer/hole regions."""

    def __init__(self, message: str, contour_index: int | None = None) -> None:
        self.contour_index = contour_index
        super().__init__(message)


__all__ = ["GeometryError", "RegionClassificationError"]

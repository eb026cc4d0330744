"""Arrangement configuration: raster, Hough and grid parameters."""

from __future__ import annotations

from dataclasses import dataclass

from hsm_order.utils.cells import DEFAULT_GRID_CELLS, ThresholdMode
from hsm_order.utils.hough import DEFAULT_ANGLE_BUCKETS
from hsm_order.utils.rasterizer import DEFAULT_BITMAP_SIZE, DEFAULT_MAGNIFICATION


@dataclass
class ArrangementConfig:
    """Controls how each dimension pair is scored."""

    # Bitmap edge length in cells
    bitmap_size: int = DEFAULT_BITMAP_SIZE
    # Render space → bitmap scale (render space [0, 100] fills the bitmap)
    magnification: float = DEFAULT_MAGNIFICATION

    # 1-degree Hough buckets
    angle_buckets: int = DEFAULT_ANGLE_BUCKETS

    # Coarse grid edge length; scores are normalized by grid_cells²
    grid_cells: int = DEFAULT_GRID_CELLS
    threshold_mode: ThresholdMode = ThresholdMode.AVERAGE

    @property
    def grid_area(self) -> int:
        return self.grid_cells * self.grid_cells

    @classmethod
    def from_settings(cls, settings, threshold_mode: int | None = None) -> ArrangementConfig:
        """Build from application settings, optionally overriding the threshold mode."""
        mode = settings.hsm_default_threshold_mode if threshold_mode is None else threshold_mode
        return cls(
            bitmap_size=settings.hsm_bitmap_size,
            magnification=settings.hsm_magnification,
            threshold_mode=ThresholdMode.parse(mode),
        )

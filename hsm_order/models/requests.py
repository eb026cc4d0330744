"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ArrangeRequest(BaseModel):
    points: list[list[float]] = Field(..., description="Raw data points, one row per point")
    clusters: list[list[int]] = Field(
        default_factory=list,
        description="Point ids of each cluster",
    )
    sample: list[int] | None = Field(default=None, description="Sampled point ids")
    selection: list[int] | None = Field(default=None, description="Currently selected point ids")
    selector: int = Field(
        default=-1,
        description="Point set to arrange: -1 = sample, -2 = selection, n >= 0 = cluster n",
    )
    threshold_mode: int | None = Field(
        default=None,
        description="Block rule: 1 = any, 2 = all, 3 = average (default from settings)",
    )
    render_space: bool = Field(
        default=False,
        description="Points are already in render space [0, 100]; skip min-max projection",
    )
    current_layout: list[int] | None = Field(
        default=None,
        description="Dimension shown in each axis slot before arranging (default identity)",
    )

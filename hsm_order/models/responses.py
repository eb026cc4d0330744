"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    stages_registered: int = 0


class AxisMoveOut(BaseModel):
    dimension: int
    source: int
    target: int


class PairScoreOut(BaseModel):
    i: int
    j: int
    big_cells: int
    score: float


class ArrangeResponse(BaseModel):
    order: list[int] = Field(default_factory=list)
    moves: list[AxisMoveOut] = Field(default_factory=list)
    similarity_matrix: list[list[float]] = Field(default_factory=list)
    pair_scores: list[PairScoreOut] = Field(default_factory=list)
    num_points: int = 0
    threshold_mode: int = 3
    processing_time_ms: float = 0.0
    stages_completed: int = 0
    errors: dict[str, str] = Field(default_factory=dict)

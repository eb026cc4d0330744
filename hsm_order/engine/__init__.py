"""HSM dimension-ordering engine."""

from hsm_order.engine.registry import stage, Layer, get_registry
from hsm_order.engine.context import ArrangementContext, AxisMove, PairScore
from hsm_order.engine.pipeline import Pipeline, arrange_dimensions, create_pipeline

__all__ = [
    "stage",
    "Layer",
    "get_registry",
    "ArrangementContext",
    "AxisMove",
    "PairScore",
    "Pipeline",
    "arrange_dimensions",
    "create_pipeline",
]

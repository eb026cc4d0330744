"""Pipeline orchestrator: runs arrangement stages in dependency order."""

from __future__ import annotations

import logging
import queue
import time
from collections.abc import Generator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any

import numpy as np
from numpy.typing import NDArray

from hsm_order.engine.config import ArrangementConfig
from hsm_order.engine.context import ArrangementContext, AxisMove, PairScore
from hsm_order.engine.projection import Projection, identity_projection
from hsm_order.engine.registry import StageRegistry, get_registry
from hsm_order.engine.selection import DataSource, PointSetSelector
from hsm_order.errors import InvalidInputError
from hsm_order.utils.cells import ThresholdMode

logger = logging.getLogger(__name__)

_STAGE_LAYERS = ["layer0", "layer1", "layer2", "layer3"]

# How often the streaming loop checks a running stage for completion
_POLL_SECONDS = 0.05


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire."""
    import importlib
    import pkgutil

    for layer_name in _STAGE_LAYERS:
        package = importlib.import_module(f"hsm_order.engine.{layer_name}")
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package.__name__}.{module_name}")


class Pipeline:
    """Orchestrates the arrangement pipeline."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: ArrangementConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config

    def run(self, ctx: ArrangementContext) -> ArrangementContext:
        """Run every stage on the given context.

        InvalidInputError propagates to the caller. Any other stage failure is
        recorded in ``ctx.errors`` and stops the run.
        """
        start = time.perf_counter()
        self._prepare(ctx)
        ordered = self.registry.resolve_order()

        logger.info(
            "Pipeline: %d stages queued for %d dims (%d pairs)",
            len(ordered),
            ctx.dimensionality,
            ctx.num_pairs,
        )

        for spec in ordered:
            t0 = time.perf_counter()
            try:
                spec.fn(ctx)
            except InvalidInputError:
                raise
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
                break
            ctx.completed_stages.add(spec.id)
            elapsed = (time.perf_counter() - t0) * 1000
            logger.debug("  %s completed in %.1fms", spec.id, elapsed)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d stages in %.0fms, order=%s",
            len(ctx.completed_stages),
            len(ordered),
            total,
            ctx.order,
        )
        return ctx

    def run_streaming(self, ctx: ArrangementContext) -> Generator[dict[str, Any], None, None]:
        """Validate, then return a generator yielding a progress dict per stage event.

        The caller's ``ctx`` is mutated in-place, so after the generator is
        exhausted the context contains all results (same as ``run()``).
        Each stage runs in a worker thread; its sub-progress events are yielded
        while it is still running. Stage failures become ``error`` events.
        """
        self._prepare(ctx)
        return self._stream(ctx, self.registry.resolve_order())

    def _stream(self, ctx: ArrangementContext, ordered: list) -> Generator[dict[str, Any], None, None]:
        total = len(ordered)

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="hsm-stage") as worker:
            for i, spec in enumerate(ordered):
                base = {
                    "stage_id": spec.id,
                    "description": spec.description,
                    "layer": spec.layer.name,
                    "index": i,
                    "total": total,
                }
                yield {**base, "elapsed_ms": 0.0, "status": "running", "error": ""}

                sub_events: queue.Queue[dict[str, Any]] = queue.Queue()

                def _on_sub_progress(done: int, pairs: int, _base=base) -> None:
                    sub_events.put({
                        **_base,
                        "elapsed_ms": 0.0,
                        "status": "running",
                        "error": "",
                        "completed": done,
                        "pairs": pairs,
                        "sub_progress": round(done / pairs, 4) if pairs else 1.0,
                    })

                ctx.progress_callback = _on_sub_progress

                t0 = time.perf_counter()
                future = worker.submit(spec.fn, ctx)
                while not future.done():
                    try:
                        yield sub_events.get(timeout=_POLL_SECONDS)
                    except queue.Empty:
                        continue
                # Events put just before the stage returned
                while not sub_events.empty():
                    yield sub_events.get_nowait()
                ctx.progress_callback = None

                status = "ok"
                error = ""
                exc = future.exception()
                if exc is None:
                    ctx.completed_stages.add(spec.id)
                else:
                    ctx.errors[spec.id] = str(exc)
                    status = "error"
                    error = str(exc)
                    logger.warning("  %s FAILED: %s", spec.id, exc)

                elapsed_ms = round((time.perf_counter() - t0) * 1000, 1)
                yield {**base, "elapsed_ms": elapsed_ms, "status": status, "error": error}

                if status == "error":
                    return

    def _prepare(self, ctx: ArrangementContext) -> None:
        """Apply the pipeline config and reject requests that cannot be arranged."""
        if self.config is not None:
            ctx.config = self.config

        if ctx.dimensionality < 2:
            raise InvalidInputError(
                f"Need at least 2 dimensions to arrange, got {ctx.dimensionality}"
            )
        if ctx.source.num_points and ctx.source.dimensionality != ctx.dimensionality:
            raise InvalidInputError(
                f"Data has {ctx.source.dimensionality} dimensions, expected {ctx.dimensionality}"
            )
        if ctx.current_layout is not None and sorted(ctx.current_layout) != list(
            range(ctx.dimensionality)
        ):
            raise InvalidInputError("Current axis layout must be a permutation of the dimensions")
        ctx.config.threshold_mode = ThresholdMode.parse(ctx.config.threshold_mode)


def create_pipeline(config: ArrangementConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance with all stages registered."""
    register_stages()
    return Pipeline(config=config)


@dataclass
class ArrangementResult:
    order: list[int]
    moves: list[AxisMove]
    similarity_matrix: NDArray[np.float64]
    pair_scores: dict[tuple[int, int], PairScore]
    num_points: int


def arrange_dimensions(
    source: DataSource,
    selector: PointSetSelector,
    projection: Projection = identity_projection,
    threshold_mode: ThresholdMode | int | None = None,
    config: ArrangementConfig | None = None,
    current_layout: list[int] | None = None,
) -> ArrangementResult:
    """(data, point set, projection, mode) → ordered dimension sequence.

    Raises:
        InvalidInputError: fewer than 2 dimensions, bad selector, empty point set.
        RuntimeError: a stage failed for any other reason.
    """
    cfg = replace(config) if config is not None else ArrangementConfig()
    if threshold_mode is not None:
        cfg.threshold_mode = ThresholdMode.parse(threshold_mode)

    ctx = ArrangementContext(
        source=source,
        selector=selector,
        projection=projection,
        config=cfg,
        current_layout=current_layout,
    )
    create_pipeline().run(ctx)

    if ctx.errors:
        stage_id, message = next(iter(ctx.errors.items()))
        raise RuntimeError(f"Arrangement stage {stage_id} failed: {message}")

    return ArrangementResult(
        order=ctx.order,
        moves=ctx.moves,
        similarity_matrix=ctx.similarity_matrix,
        pair_scores=ctx.pair_scores,
        num_points=ctx.num_points,
    )

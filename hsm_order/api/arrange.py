"""POST /api/arrange: HSM dimension ordering for parallel coordinates."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from hsm_order.config import Settings
from hsm_order.dependencies import get_settings
from hsm_order.engine.config import ArrangementConfig
from hsm_order.engine.context import ArrangementContext
from hsm_order.engine.pipeline import create_pipeline
from hsm_order.engine.projection import identity_projection, minmax_projection
from hsm_order.engine.selection import DataSource, resolve_point_set, selector_from_code
from hsm_order.errors import InvalidInputError
from hsm_order.models.requests import ArrangeRequest
from hsm_order.models.responses import ArrangeResponse, AxisMoveOut, PairScoreOut

router = APIRouter()


_SENTINEL = object()  # marks end of queue


def build_context(req: ArrangeRequest, settings: Settings) -> ArrangementContext:
    """Turn a request into a pipeline context. Raises InvalidInputError on bad input."""
    if not req.points:
        raise InvalidInputError("No data points given")
    if settings.hsm_max_points and len(req.points) > settings.hsm_max_points:
        raise InvalidInputError(
            f"Too many points: {len(req.points)} > {settings.hsm_max_points}"
        )
    widths = {len(p) for p in req.points}
    if len(widths) != 1:
        raise InvalidInputError(f"All points must have the same dimensionality, got {sorted(widths)}")

    source = DataSource(
        points=req.points,
        clusters=req.clusters,
        sample=req.sample,
        selection=req.selection,
    )
    selector = selector_from_code(req.selector)
    # Fail before any work starts: unknown cluster, missing sample/selection, empty set
    resolve_point_set(source, selector)
    projection = identity_projection if req.render_space else minmax_projection(source.points)

    return ArrangementContext(
        source=source,
        selector=selector,
        projection=projection,
        config=ArrangementConfig.from_settings(settings, req.threshold_mode),
        current_layout=req.current_layout,
    )


def context_to_response(ctx: ArrangementContext, elapsed_ms: float) -> ArrangeResponse:
    matrix = ctx.similarity_matrix
    return ArrangeResponse(
        order=ctx.order,
        moves=[AxisMoveOut(dimension=m.dimension, source=m.source, target=m.target) for m in ctx.moves],
        similarity_matrix=matrix.tolist() if matrix is not None else [],
        pair_scores=[
            PairScoreOut(i=i, j=j, big_cells=p.big_cells, score=p.score)
            for (i, j), p in sorted(ctx.pair_scores.items())
        ],
        num_points=ctx.num_points,
        threshold_mode=int(ctx.config.threshold_mode),
        processing_time_ms=round(elapsed_ms, 1),
        stages_completed=len(ctx.completed_stages),
        errors=ctx.errors,
    )


async def _stream_arrange(req: ArrangeRequest, settings: Settings) -> AsyncGenerator[str, None]:
    """Drive pipeline.run_streaming() in a thread, yielding SSE events as they arrive."""
    start = time.perf_counter()

    try:
        ctx = build_context(req, settings)
        events = create_pipeline().run_streaming(ctx)
    except InvalidInputError as e:
        data = json.dumps({"type": "error", "message": str(e)})
        yield f"event: error\ndata: {data}\n\n"
        return

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def _run_pipeline() -> None:
        """Sync pipeline in thread: pushes progress dicts onto the async queue."""
        try:
            for progress in events:
                loop.call_soon_threadsafe(queue.put_nowait, progress)
        finally:
            loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    # Start pipeline in a thread so the event loop stays free to flush SSE
    loop.run_in_executor(None, _run_pipeline)

    while True:
        item = await queue.get()
        if item is _SENTINEL:
            break
        yield f"event: progress\ndata: {json.dumps(item)}\n\n"

    if ctx.errors:
        stage_id, message = next(iter(ctx.errors.items()))
        data = json.dumps({"type": "error", "stage_id": stage_id, "message": message})
        yield f"event: error\ndata: {data}\n\n"
        return

    elapsed = (time.perf_counter() - start) * 1000
    response = context_to_response(ctx, elapsed)
    yield f"event: result\ndata: {response.model_dump_json()}\n\n"

    yield f"event: done\ndata: {json.dumps({'type': 'done'})}\n\n"


@router.post("/arrange/stream")
async def arrange_stream(
    req: ArrangeRequest,
    settings: Settings = Depends(get_settings),
) -> StreamingResponse:
    return StreamingResponse(
        _stream_arrange(req, settings),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/arrange", response_model=ArrangeResponse)
def arrange(
    req: ArrangeRequest,
    settings: Settings = Depends(get_settings),
) -> ArrangeResponse:
    start = time.perf_counter()

    try:
        ctx = build_context(req, settings)
        ctx = create_pipeline().run(ctx)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    if ctx.errors:
        raise HTTPException(status_code=500, detail=ctx.errors)

    elapsed = (time.perf_counter() - start) * 1000
    return context_to_response(ctx, elapsed)

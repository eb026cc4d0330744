"""Stage registry: each arrangement step is a plain function registered by decorator.

    @stage(id="S2.01", layer=Layer.ARRANGEMENT, dependencies=["S1.01"])
    def chain_arrangement(ctx: ArrangementContext) -> None:
        ctx.order = build_chain(ctx.similarity_matrix)
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from hsm_order.engine.context import ArrangementContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    SELECTION = 0
    SCORING = 1
    ARRANGEMENT = 2
    PLACEMENT = 3


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: Callable[["ArrangementContext"], None]
    dependencies: list[str] = field(default_factory=list)
    description: str = ""


class StageRegistry:
    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def resolve_order(self) -> list[StageSpec]:
        """Stages sorted so every stage follows its dependencies; ties by (layer, id).

        Raises:
            ValueError: a dependency is unknown or the dependencies form a cycle.
        """
        ordered: list[StageSpec] = []
        placed: set[str] = set()
        pending = sorted(self._stages.values(), key=lambda s: (s.layer, s.id))

        for spec in pending:
            missing = [d for d in spec.dependencies if d not in self._stages]
            if missing:
                raise ValueError(f"Stage {spec.id} depends on unknown stages: {missing}")

        while pending:
            ready = next(
                (s for s in pending if all(d in placed for d in s.dependencies)), None
            )
            if ready is None:
                raise ValueError(
                    f"Circular dependency detected among: {sorted(s.id for s in pending)}"
                )
            ordered.append(ready)
            placed.add(ready.id)
            pending.remove(ready)

        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    description: str = "",
):
    """Register the decorated function as a pipeline stage."""

    def decorator(fn: Callable[["ArrangementContext"], None]):
        _registry.register(
            StageSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=dependencies or [],
                description=description,
            )
        )
        return fn

    return decorator

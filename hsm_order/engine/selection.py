"""Point-set selection: which data points take part in an arrangement.

A selector is resolved once per arrangement request, never per pair.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np
from numpy.typing import NDArray

from hsm_order.errors import InvalidInputError, SelectorMismatchError

# Menu codes used by the parallel-coordinates "arrange" entries.
SAMPLE_CODE = -1
SELECTION_CODE = -2


@dataclass(frozen=True)
class ClusterSelector:
    index: int

    def describe(self) -> str:
        return f"cluster {self.index}"


@dataclass(frozen=True)
class SampleSelector:
    def describe(self) -> str:
        return "sample"


@dataclass(frozen=True)
class SelectionSelector:
    def describe(self) -> str:
        return "selection"


PointSetSelector = Union[ClusterSelector, SampleSelector, SelectionSelector]


def selector_from_code(code: int) -> PointSetSelector:
    """-1 = sample, -2 = current selection, n >= 0 = cluster n."""
    if code == SAMPLE_CODE:
        return SampleSelector()
    if code == SELECTION_CODE:
        return SelectionSelector()
    if code >= 0:
        return ClusterSelector(index=code)
    raise SelectorMismatchError(f"Unknown point-set selector code: {code}")


@dataclass
class DataSource:
    """Raw data points plus the named subsets an arrangement can draw from."""

    # N×D raw coordinates
    points: NDArray[np.float64]
    # Point ids per cluster
    clusters: list[list[int]] = field(default_factory=list)
    # Sampled point ids (None = no sampling result available)
    sample: list[int] | None = None
    # Currently selected point ids (None = nothing selected)
    selection: list[int] | None = None

    def __post_init__(self) -> None:
        self.points = np.atleast_2d(np.asarray(self.points, dtype=np.float64))

    @property
    def num_points(self) -> int:
        return int(self.points.shape[0]) if self.points.size else 0

    @property
    def dimensionality(self) -> int:
        return int(self.points.shape[1]) if self.points.size else 0


def resolve_point_set(source: DataSource, selector: PointSetSelector) -> NDArray[np.int64]:
    """Return the ids of the points the selector refers to.

    Raises:
        SelectorMismatchError: unknown cluster, missing sample/selection, or ids out of range.
        InvalidInputError: the resolved set is empty.
    """
    if isinstance(selector, ClusterSelector):
        if not 0 <= selector.index < len(source.clusters):
            raise SelectorMismatchError(
                f"Cluster {selector.index} does not exist ({len(source.clusters)} clusters)"
            )
        ids = source.clusters[selector.index]
    elif isinstance(selector, SampleSelector):
        if source.sample is None:
            raise SelectorMismatchError("No sampling result available")
        ids = source.sample
    elif isinstance(selector, SelectionSelector):
        if source.selection is None:
            raise SelectorMismatchError("No current selection")
        ids = source.selection
    else:
        raise SelectorMismatchError(f"Unsupported selector: {selector!r}")

    resolved = np.asarray(ids, dtype=np.int64).reshape(-1)
    if resolved.size == 0:
        raise InvalidInputError(f"Point set for {selector.describe()} is empty")

    n = source.num_points
    if resolved.min() < 0 or resolved.max() >= n:
        raise SelectorMismatchError(
            f"Point set for {selector.describe()} references ids outside [0, {n})"
        )
    return resolved

"""Map chart events back to the dataset rows they point at."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from linkedcharts.coupling.errors import (
    PointIndexOutOfRangeError,
    SourceMismatchError,
    UnknownCurveError,
    UnknownFieldError,
)
from linkedcharts.coupling.events import ChartEvent
from linkedcharts.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TraceGroup:
    """Declares which rows one trace of a chart is drawn from.

    ``field is None`` means the trace shows every row of the dataset.
    """
    label: str
    field: Optional[str] = None
    value: Any = None

    def mask(self, dataset: pd.DataFrame) -> np.ndarray:
        if self.field is None:
            return np.ones(len(dataset), dtype=bool)
        if self.field not in dataset.columns:
            raise UnknownFieldError([self.field], dataset.columns)
        return (dataset[self.field] == self.value).to_numpy()


class TraceMapping:
    """Ordered trace-index to subgroup declaration for one chart.

    Chart builders draw trace ``i`` from ``subgroup(dataset, i)`` and the
    interpreter resolves ``curve_index == i`` through the same call, so the
    two sides cannot disagree about trace order.
    """

    def __init__(self, groups: Sequence[TraceGroup]):
        if not groups:
            raise ValueError("a trace mapping needs at least one trace")
        self.groups: Tuple[TraceGroup, ...] = tuple(groups)

    @classmethod
    def by_values(
        cls,
        field: str,
        values: Sequence[Any],
        labels: Optional[Sequence[str]] = None,
    ) -> "TraceMapping":
        labels = list(labels) if labels is not None else [str(v) for v in values]
        if len(labels) != len(values):
            raise ValueError("labels and values must have the same length")
        return cls([TraceGroup(label, field, value) for label, value in zip(labels, values)])

    @classmethod
    def single(cls, label: str = "all") -> "TraceMapping":
        return cls([TraceGroup(label)])

    def __len__(self) -> int:
        return len(self.groups)

    def __iter__(self) -> Iterator[TraceGroup]:
        return iter(self.groups)

    @property
    def labels(self) -> List[str]:
        return [g.label for g in self.groups]

    def group(self, curve_index: int) -> TraceGroup:
        if not 0 <= curve_index < len(self.groups):
            raise UnknownCurveError(curve_index, len(self.groups))
        return self.groups[curve_index]

    def positions(self, dataset: pd.DataFrame, curve_index: int) -> np.ndarray:
        """Integer row positions in ``dataset`` that make up trace ``curve_index``."""
        return np.flatnonzero(self.group(curve_index).mask(dataset))

    def subgroup(self, dataset: pd.DataFrame, curve_index: int) -> pd.DataFrame:
        return dataset.iloc[self.positions(dataset, curve_index)]

    def subgroups(self, dataset: pd.DataFrame) -> List[Tuple[TraceGroup, pd.DataFrame]]:
        return [(g, self.subgroup(dataset, i)) for i, g in enumerate(self.groups)]


def interpret(
    event: ChartEvent,
    dataset: pd.DataFrame,
    mapping: TraceMapping,
    expected_source: Optional[str] = None,
) -> pd.DataFrame:
    """Return the rows of ``dataset`` referenced by ``event``.

    One row per event point, in event order; the original index labels are
    kept. Raises a :class:`~linkedcharts.coupling.errors.ContractViolationError`
    subclass when the event cannot have come from a chart built with
    ``mapping``.
    """
    if expected_source is not None and event.source_id != expected_source:
        raise SourceMismatchError(expected_source, event.source_id)

    if event.is_empty:
        return dataset.iloc[0:0]

    cache: Dict[int, np.ndarray] = {}
    rows: List[int] = []
    for point in event.points:
        positions = cache.get(point.curve_index)
        if positions is None:
            positions = mapping.positions(dataset, point.curve_index)
            cache[point.curve_index] = positions
        if not 0 <= point.point_index < len(positions):
            raise PointIndexOutOfRangeError(
                point.curve_index,
                point.point_index,
                mapping.group(point.curve_index).label,
                len(positions),
            )
        rows.append(int(positions[point.point_index]))

    logger.debug(
        f"[{event.source_id}] {event.kind.value}: resolved {len(rows)} point(s) "
        f"across {len(cache)} trace(s)"
    )
    return dataset.iloc[rows]


class EventInterpreter:
    """Interpreter bound to one upstream chart (its source tag and trace mapping)."""

    def __init__(self, expected_source: str, mapping: TraceMapping):
        self.expected_source = expected_source
        self.mapping = mapping

    def accepts(self, event: Optional[ChartEvent]) -> bool:
        return event is not None and event.source_id == self.expected_source

    def interpret(self, event: ChartEvent, dataset: pd.DataFrame) -> pd.DataFrame:
        return interpret(event, dataset, self.mapping, self.expected_source)

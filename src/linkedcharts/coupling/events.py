"""Chart events: the records that couple one chart to the next."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence

from linkedcharts.config.schemas import SelectionPayload
from linkedcharts.coupling.errors import MalformedEventError


class EventKind(str, Enum):
    SELECTED = "selected"
    CLICKED = "clicked"
    HOVERED = "hovered"


@dataclass(frozen=True)
class EventPoint:
    """A single point reference inside a :class:`ChartEvent`.

    ``point_index`` counts from zero within the trace ``curve_index``, not
    across the whole figure.
    """
    curve_index: int
    point_index: int
    x: Any = None
    y: Any = None


@dataclass(frozen=True)
class ChartEvent:
    source_id: str
    kind: EventKind
    points: tuple[EventPoint, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable of points but always store an immutable tuple.
        object.__setattr__(self, "points", tuple(self.points))
        object.__setattr__(self, "kind", EventKind(self.kind))

    @property
    def is_empty(self) -> bool:
        return not self.points

    @classmethod
    def from_payload(
        cls,
        source_id: str,
        kind: EventKind | str,
        payload: Optional[Mapping[str, Any] | Sequence[Mapping[str, Any]]],
    ) -> Optional["ChartEvent"]:
        """Build an event from a raw Streamlit or plotly.js payload.

        ``payload`` may be the selection state returned by
        ``st.plotly_chart(on_select=...)`` (with or without its outer
        ``selection`` key), a plotly.js event object with a ``points``
        list, or a bare list of point dicts. ``None`` means nothing has
        happened yet and yields ``None``.
        """
        if payload is None:
            return None
        points = _points_of(payload)
        return cls(
            source_id=source_id,
            kind=EventKind(kind),
            points=tuple(parse_point(p) for p in points),
        )


def _points_of(payload: Any) -> Iterable[Mapping[str, Any]]:
    if isinstance(payload, Mapping):
        if "selection" in payload and payload["selection"] is not None:
            selection: SelectionPayload = payload["selection"]
            return selection.get("points") or ()
        return payload.get("points") or ()
    return payload


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    raise MalformedEventError(f"point payload is missing any of {keys}: {dict(raw)!r}")


def parse_point(raw: Mapping[str, Any]) -> EventPoint:
    """Normalise one point dict from either payload flavour."""
    curve = _first(raw, "curve_number", "curveNumber")
    # pointIndex is the per-trace index; pointNumber is its alias for
    # plain scatter and bar traces.
    point = _first(raw, "point_index", "pointIndex", "point_number", "pointNumber")
    if isinstance(point, (list, tuple)):
        # heatmap-style [row, col] indices are not supported by row lookup
        raise MalformedEventError(f"multi-dimensional point index {point!r} is not supported")
    return EventPoint(
        curve_index=int(curve),
        point_index=int(point),
        x=raw.get("x"),
        y=raw.get("y"),
    )

"""Tests for chart event parsing."""

import pytest

from linkedcharts.coupling.errors import ContractViolationError, MalformedEventError
from linkedcharts.coupling.events import ChartEvent, EventKind, EventPoint, parse_point


def test_from_payload_none_means_no_event():
    """A missing payload is 'nothing selected yet', not an error."""
    assert ChartEvent.from_payload("scatter", EventKind.SELECTED, None) is None


def test_from_payload_streamlit_selection_state(make_selection):
    """Streamlit selection state is read from its nested 'selection' key."""
    event = ChartEvent.from_payload("scatter", "selected", make_selection((0, 2), (1, 0)))

    assert event.source_id == "scatter"
    assert event.kind is EventKind.SELECTED
    assert event.points == (EventPoint(0, 2), EventPoint(1, 0))
    assert not event.is_empty


def test_from_payload_plotly_js_event():
    """plotly.js click/hover payloads use camelCase keys."""
    payload = {"points": [{"curveNumber": 1, "pointNumber": 4, "pointIndex": 4, "x": 2.5, "y": 7}]}
    event = ChartEvent.from_payload("line", EventKind.HOVERED, payload)

    assert event.kind is EventKind.HOVERED
    assert event.points == (EventPoint(curve_index=1, point_index=4, x=2.5, y=7),)


def test_from_payload_bare_point_list():
    event = ChartEvent.from_payload("bar", EventKind.CLICKED, [{"curveNumber": 0, "pointNumber": 1}])
    assert event.points == (EventPoint(0, 1),)


def test_from_payload_empty_selection_is_empty_event(make_selection):
    event = ChartEvent.from_payload("scatter", EventKind.SELECTED, make_selection())
    assert event is not None
    assert event.is_empty


def test_point_index_preferred_over_point_number():
    point = parse_point({"curve_number": 0, "point_index": 3, "point_number": 9})
    assert point.point_index == 3


def test_malformed_point_is_contract_violation():
    """Points without trace/point references cannot be decoded."""
    with pytest.raises(MalformedEventError):
        parse_point({"x": 1, "y": 2})
    with pytest.raises(ContractViolationError):
        parse_point({"curveNumber": 0, "pointIndex": [1, 2]})


def test_chart_event_is_immutable():
    event = ChartEvent("scatter", EventKind.CLICKED, [EventPoint(0, 0)])
    assert isinstance(event.points, tuple)
    with pytest.raises(AttributeError):
        event.source_id = "other"

"""Tests for the reactive recomputation state machine."""

import pytest

from linkedcharts.coupling.errors import PointIndexOutOfRangeError
from linkedcharts.coupling.events import ChartEvent, EventKind, EventPoint
from linkedcharts.coupling.interpreter import EventInterpreter
from linkedcharts.runtime.reactive import (
    CONTRACT_ERROR,
    NO_SELECTION,
    RENDERED,
    CoupledOutput,
    CoupledResult,
    OutputState,
    coupling_stage,
)


def _event(*points, source="scatter"):
    return ChartEvent(source, EventKind.SELECTED, [EventPoint(c, p) for c, p in points])


class RecordingCompute:
    """Compute function that remembers how often it ran."""

    def __init__(self, result="chart"):
        self.calls = []
        self.result = result

    def __call__(self, event, session):
        self.calls.append(event)
        return self.result


def test_no_event_short_circuits_without_computing(session):
    compute = RecordingCompute()
    out = CoupledOutput("counts", "scatter", compute)

    assert out.trigger(None, session) == NO_SELECTION
    assert out.state is OutputState.IDLE
    assert not out.has_result
    assert compute.calls == []


def test_event_renders_and_replaces_result(session):
    compute = RecordingCompute()
    out = CoupledOutput("counts", "scatter", compute)

    assert out.trigger(_event((0, 0)), session) == RENDERED
    assert out.state is OutputState.RENDERED
    assert out.result == "chart"
    assert out.renders == 1

    compute.result = "chart 2"
    assert out.trigger(_event((0, 1)), session) == RENDERED
    assert out.result == "chart 2"
    assert out.renders == 2


def test_empty_event_keeps_previous_result(session):
    out = CoupledOutput("counts", "scatter", RecordingCompute())
    out.trigger(_event((0, 0)), session)

    assert out.trigger(_event(), session) == NO_SELECTION
    assert out.state is OutputState.IDLE
    assert out.result == "chart"


def test_contract_violation_is_reported_separately(session):
    def compute(event, session):
        raise PointIndexOutOfRangeError(0, 5, "malignant", 3)

    out = CoupledOutput("counts", "scatter", RecordingCompute())
    out.trigger(_event((0, 0)), session)
    out.compute = compute

    assert out.trigger(_event((0, 5)), session) == CONTRACT_ERROR
    assert isinstance(out.error, PointIndexOutOfRangeError)
    assert out.result == "chart"
    assert out.state is OutputState.IDLE


def test_event_from_other_source_is_rejected(session):
    compute = RecordingCompute()
    out = CoupledOutput("counts", "scatter", compute)

    assert out.trigger(_event((0, 0), source="bar"), session) == CONTRACT_ERROR
    assert compute.calls == []


def test_unexpected_errors_propagate(session):
    def compute(event, session):
        raise RuntimeError("boom")

    out = CoupledOutput("counts", "scatter", compute)
    with pytest.raises(RuntimeError):
        out.trigger(_event((0, 0)), session)
    assert out.state is OutputState.IDLE


def test_changed_inputs_drop_previous_result(session):
    out = CoupledOutput("counts", "scatter", RecordingCompute(), publish_as="selected")
    out.trigger(_event((0, 0)), session, inputs=("mean radius", "mean texture"))
    assert session.latest("selected") == "chart"

    assert out.trigger(None, session, inputs=("mean area", "mean texture")) == NO_SELECTION
    assert not out.has_result
    assert session.latest("selected") is None


def test_result_published_only_on_success(session):
    out = CoupledOutput("counts", "scatter", RecordingCompute(), publish_as="selected")

    out.trigger(None, session)
    assert session.latest("selected") is None

    out.trigger(_event((0, 0)), session)
    assert session.latest("selected") == "chart"


def test_illegal_transition_is_refused():
    out = CoupledOutput("counts", "scatter", RecordingCompute())
    with pytest.raises(RuntimeError):
        out._transition(OutputState.RENDERED)


def test_session_reuses_outputs_and_swaps_compute(session):
    first = RecordingCompute("a")
    second = RecordingCompute("b")

    out = session.output("counts", "scatter", first)
    assert session.output("counts", "scatter", second) is out
    session.trigger("counts", _event((0, 0)))

    assert first.calls == []
    assert out.result == "b"


def test_dispatch_routes_by_source_tag(session):
    session.output("counts", "scatter", RecordingCompute("counts"))
    session.output("boxes", "bar", RecordingCompute("boxes"))

    assert session.dispatch(_event((0, 0), source="bar")) == {"boxes": RENDERED}
    assert session.outputs["boxes"].result == "boxes"
    assert not session.outputs["counts"].has_result
    assert session.dispatch(_event((0, 0), source="heatmap")) == {}


def test_coupling_stage_interprets_then_groups(session, cancer_frame, class_mapping):
    compute = coupling_stage(EventInterpreter("scatter", class_mapping), cancer_frame, ["Class"])
    event = _event((0, 0), (0, 1), (1, 0), (1, 1), (1, 2))

    result = compute(event, session)

    assert isinstance(result, CoupledResult)
    assert len(result.rows) == 5
    assert dict(result.view) == {("malignant",): 2, ("benign",): 3}
    assert result.event is event


def test_empty_event_from_other_source_is_ignored(session):
    compute = RecordingCompute()
    out = CoupledOutput("counts", "scatter", compute)

    assert out.trigger(_event(source="bar"), session) == NO_SELECTION
    assert out.error is None
    assert compute.calls == []

"""Reactive recomputation of coupled chart outputs.

Each output chart is a :class:`CoupledOutput` with its own
``IDLE -> COMPUTING -> RENDERED -> IDLE`` cycle. Outputs and the values
they hand to later coupling hops live in a :class:`CouplingSession`,
which the host UI keeps per user session (``st.session_state`` in the
dashboard) and passes explicitly into every compute function.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Optional, Sequence

import pandas as pd

from linkedcharts.coupling.errors import ContractViolationError, SourceMismatchError
from linkedcharts.coupling.events import ChartEvent
from linkedcharts.coupling.interpreter import EventInterpreter
from linkedcharts.coupling.views import DerivedView, build
from linkedcharts.utils.logging import get_logger

logger = get_logger(__name__)


class OutputState(str, Enum):
    IDLE = "idle"
    COMPUTING = "computing"
    RENDERED = "rendered"


# Status strings reported by CoupledOutput.trigger
RENDERED = "rendered"
NO_SELECTION = "no_selection"
CONTRACT_ERROR = "contract_error"

_ALLOWED = {
    (OutputState.IDLE, OutputState.COMPUTING),
    (OutputState.COMPUTING, OutputState.RENDERED),
    (OutputState.COMPUTING, OutputState.IDLE),
    (OutputState.RENDERED, OutputState.IDLE),
}


@dataclass(frozen=True)
class CoupledResult:
    """What one coupling stage hands to its chart: the rows and their view."""
    rows: pd.DataFrame
    view: Optional[DerivedView]
    event: Optional[ChartEvent] = None


Compute = Callable[[Optional[ChartEvent], "CouplingSession"], Any]


class CoupledOutput:
    """One output chart driven by events from a single upstream source tag."""

    def __init__(
        self,
        name: str,
        source_id: str,
        compute: Compute,
        *,
        publish_as: Optional[str] = None,
    ):
        self.name = name
        self.source_id = source_id
        self.compute = compute
        self.publish_as = publish_as
        self.state = OutputState.IDLE
        self.result: Any = None
        self.error: Optional[ContractViolationError] = None
        self.status: Optional[str] = None
        self.renders = 0
        self._inputs: Optional[Hashable] = None

    def _transition(self, new: OutputState) -> None:
        if (self.state, new) not in _ALLOWED:
            raise RuntimeError(f"[{self.name}] illegal transition {self.state.value} -> {new.value}")
        logger.debug(f"[{self.name}] {self.state.value} -> {new.value}")
        self.state = new

    @property
    def has_result(self) -> bool:
        return self.result is not None

    def invalidate(self) -> None:
        """Drop the rendered result, e.g. after a selector it depends on changed."""
        if self.state is OutputState.RENDERED:
            self._transition(OutputState.IDLE)
        self.result = None
        self.error = None

    def trigger(
        self,
        event: Optional[ChartEvent],
        session: "CouplingSession",
        inputs: Optional[Hashable] = None,
    ) -> str:
        """Recompute this output for ``event`` and return the resulting status.

        ``inputs`` is a hashable snapshot of the selector values the output
        depends on; when it differs from the previous call the old result is
        discarded before recomputing.

        - ``None`` or empty event: nothing is computed and the previous
          result (if still valid for ``inputs``) stays in place. This check
          runs before the source-tag check, so an empty event from a foreign
          source is ignored rather than rejected.
        - contract violation: logged, kept in :attr:`error`, previous
          result untouched.
        - otherwise the new result replaces the old one in full.
        """
        if self.state is OutputState.RENDERED:
            self._transition(OutputState.IDLE)

        if inputs != self._inputs:
            if self._inputs is not None:
                logger.debug(f"[{self.name}] inputs changed, dropping previous result")
            self.invalidate()
            if self.publish_as is not None:
                session.retract(self.publish_as)
            self._inputs = inputs

        self._transition(OutputState.COMPUTING)

        if event is None or event.is_empty:
            self._transition(OutputState.IDLE)
            self.status = NO_SELECTION
            return self.status

        try:
            if event.source_id != self.source_id:
                raise SourceMismatchError(self.source_id, event.source_id)
            result = self.compute(event, session)
        except ContractViolationError as e:
            logger.error(f"[{self.name}] rejected event from {event.source_id!r}: {e}")
            self.error = e
            self._transition(OutputState.IDLE)
            self.status = CONTRACT_ERROR
            return self.status
        except Exception:
            self._transition(OutputState.IDLE)
            raise

        self.result = result
        self.error = None
        self.renders += 1
        if self.publish_as is not None:
            session.publish(self.publish_as, result)
        self._transition(OutputState.RENDERED)
        self.status = RENDERED
        return self.status


class CouplingSession:
    """Per-session registry of coupled outputs and published stage results."""

    def __init__(self) -> None:
        self.outputs: Dict[str, CoupledOutput] = {}
        self._published: Dict[str, Any] = {}

    def output(
        self,
        name: str,
        source_id: str,
        compute: Compute,
        *,
        publish_as: Optional[str] = None,
    ) -> CoupledOutput:
        """Return the output called ``name``, creating it on first use.

        The compute function is replaced on every call because it usually
        closes over the dataset of the current page run.
        """
        out = self.outputs.get(name)
        if out is None or out.source_id != source_id:
            out = CoupledOutput(name, source_id, compute, publish_as=publish_as)
            self.outputs[name] = out
        else:
            out.compute = compute
            out.publish_as = publish_as
        return out

    def trigger(
        self,
        name: str,
        event: Optional[ChartEvent],
        inputs: Optional[Hashable] = None,
    ) -> str:
        return self.outputs[name].trigger(event, self, inputs)

    def dispatch(self, event: ChartEvent) -> Dict[str, str]:
        """Send ``event`` to every output subscribed to its source tag."""
        targets = [o for o in self.outputs.values() if o.source_id == event.source_id]
        if not targets:
            logger.warning(f"no output subscribed to source {event.source_id!r}; event ignored")
        return {o.name: o.trigger(event, self, o._inputs) for o in targets}

    def publish(self, key: str, value: Any) -> None:
        self._published[key] = value

    def latest(self, key: str, default: Any = None) -> Any:
        return self._published.get(key, default)

    def retract(self, key: str) -> None:
        self._published.pop(key, None)


def coupling_stage(
    interpreter: EventInterpreter,
    dataset: pd.DataFrame,
    group_fields: Sequence[str],
    value_field: Optional[str] = None,
    summary: str = "mean",
) -> Compute:
    """Compute function for the common interpret-then-group stage."""

    def compute(event: Optional[ChartEvent], session: CouplingSession) -> CoupledResult:
        rows = interpreter.interpret(event, dataset)
        view = build(rows, group_fields, value_field=value_field, summary=summary)
        return CoupledResult(rows=rows, view=view, event=event)

    return compute

"""Framework-independent event coupling: events, interpreter, derived views."""

from linkedcharts.coupling.errors import (
    ContractViolationError,
    CouplingError,
    MalformedEventError,
    PointIndexOutOfRangeError,
    SourceMismatchError,
    UnknownCurveError,
    UnknownFieldError,
)
from linkedcharts.coupling.events import ChartEvent, EventKind, EventPoint
from linkedcharts.coupling.interpreter import EventInterpreter, TraceGroup, TraceMapping, interpret
from linkedcharts.coupling.views import DerivedView, build, rows_for_key

__all__ = [
    "ChartEvent",
    "ContractViolationError",
    "CouplingError",
    "DerivedView",
    "EventInterpreter",
    "EventKind",
    "EventPoint",
    "MalformedEventError",
    "PointIndexOutOfRangeError",
    "SourceMismatchError",
    "TraceGroup",
    "TraceMapping",
    "UnknownCurveError",
    "UnknownFieldError",
    "build",
    "interpret",
    "rows_for_key",
]

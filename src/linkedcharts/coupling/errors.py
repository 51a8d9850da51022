"""Exceptions raised by the event-coupling pipeline.

An absent or empty event is never an error. Everything derived from
:class:`ContractViolationError` means the chart that emitted an event and
the interpreter consuming it disagree about configuration.
"""


class CouplingError(Exception):
    """Base class for coupling failures."""


class ContractViolationError(CouplingError):
    """Event does not match the chart configuration it claims to come from."""


class SourceMismatchError(ContractViolationError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"event from source {actual!r} delivered to consumer of {expected!r}")


class UnknownCurveError(ContractViolationError):
    def __init__(self, curve_index: int, n_curves: int):
        self.curve_index = curve_index
        self.n_curves = n_curves
        super().__init__(
            f"curve index {curve_index} is not declared in the trace mapping "
            f"({n_curves} trace(s) declared)"
        )


class PointIndexOutOfRangeError(ContractViolationError):
    def __init__(self, curve_index: int, point_index: int, subgroup: str, size: int):
        self.curve_index = curve_index
        self.point_index = point_index
        self.subgroup = subgroup
        self.size = size
        super().__init__(
            f"point index {point_index} out of range for curve {curve_index} "
            f"({subgroup!r} has {size} record(s))"
        )


class UnknownFieldError(CouplingError, KeyError):
    def __init__(self, fields, available):
        self.fields = list(fields)
        self.available = list(available)
        super().__init__(f"unknown field(s) {self.fields}; available: {self.available}")

    def __str__(self) -> str:
        return self.args[0]


class MalformedEventError(ContractViolationError, ValueError):
    """Raw payload could not be read as a list of trace/point references."""

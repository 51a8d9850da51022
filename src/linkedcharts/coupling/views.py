"""Derived views: grouped counts (and optional summaries) of coupled rows."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from linkedcharts.config.config import SUMMARY_FUNCS
from linkedcharts.coupling.errors import UnknownFieldError

GroupKey = Tuple[Any, ...]


class DerivedView(Mapping):
    """Read-only mapping from group key to member count.

    Keys are tuples of the grouped field values, ordered by the first row in
    which each key appeared. When a value field was summarised,
    :meth:`summary_of` returns the per-group aggregate.
    """

    def __init__(
        self,
        group_fields: Sequence[str],
        counts: Dict[GroupKey, int],
        summaries: Optional[Dict[GroupKey, float]] = None,
        value_field: Optional[str] = None,
        summary: Optional[str] = None,
    ):
        self.group_fields: Tuple[str, ...] = tuple(group_fields)
        self._counts = dict(counts)
        self._summaries = dict(summaries or {})
        self.value_field = value_field
        self.summary = summary

    def __getitem__(self, key: GroupKey) -> int:
        return self._counts[key]

    def __iter__(self) -> Iterator[GroupKey]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"DerivedView({self.group_fields!r}, {self._counts!r})"

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    @property
    def summary_column(self) -> Optional[str]:
        if self.value_field is None:
            return None
        return f"{self.summary} {self.value_field}"

    def summary_of(self, key: GroupKey) -> float:
        if self.value_field is None:
            raise LookupError("this view was built without a value field")
        return self._summaries[key]

    def label_of(self, key: GroupKey, sep: str = " / ") -> str:
        return sep.join(str(part) for part in key)

    def to_frame(self) -> pd.DataFrame:
        """One row per group, in view order, with a ``count`` column."""
        columns: List[str] = list(self.group_fields) + ["count"]
        if self.summary_column is not None:
            columns.append(self.summary_column)
        records = []
        for key, count in self._counts.items():
            record = list(key) + [count]
            if self.summary_column is not None:
                record.append(self._summaries[key])
            records.append(record)
        return pd.DataFrame.from_records(records, columns=columns)


def _normalise(value: Any) -> Any:
    # NaN never equals itself, so it cannot serve as a dict key.
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _check_fields(rows: pd.DataFrame, fields: Sequence[str]) -> None:
    missing = [f for f in fields if f not in rows.columns]
    if missing:
        raise UnknownFieldError(missing, rows.columns)


def build(
    rows: pd.DataFrame,
    group_fields: Sequence[str],
    value_field: Optional[str] = None,
    summary: str = "mean",
) -> DerivedView:
    """Group ``rows`` by ``group_fields`` and count each group.

    Groups are listed in first-seen order of the input rows. With
    ``value_field`` set, each group also carries ``summary`` (one of
    ``mean``, ``median``, ``sum``, ``min``, ``max``) of that column.
    """
    group_fields = list(group_fields)
    if not group_fields:
        raise ValueError("at least one group field is required")
    _check_fields(rows, group_fields + ([value_field] if value_field else []))
    if value_field is not None and summary not in SUMMARY_FUNCS:
        raise ValueError(f"unsupported summary {summary!r}; expected one of {SUMMARY_FUNCS}")

    counts: Dict[GroupKey, int] = {}
    members: Dict[GroupKey, List[Any]] = {}
    columns = [rows[f].tolist() for f in group_fields]
    values = rows[value_field].tolist() if value_field else None
    for i, raw_key in enumerate(zip(*columns)):
        key = tuple(_normalise(v) for v in raw_key)
        counts[key] = counts.get(key, 0) + 1
        if values is not None:
            members.setdefault(key, []).append(values[i])

    summaries = None
    if value_field is not None:
        summaries = {
            key: float(getattr(pd.Series(vals, dtype=float), summary)())
            for key, vals in members.items()
        }
    return DerivedView(
        group_fields,
        counts,
        summaries,
        value_field if value_field else None,
        summary if value_field else None,
    )


def rows_for_key(rows: pd.DataFrame, group_fields: Sequence[str], key: Any) -> pd.DataFrame:
    """Rows of ``rows`` belonging to group ``key`` (a tuple, or a scalar for one field)."""
    group_fields = list(group_fields)
    if not isinstance(key, tuple):
        key = (key,)
    if len(key) != len(group_fields):
        raise ValueError(f"key {key!r} does not match group fields {group_fields}")
    _check_fields(rows, group_fields)
    mask = np.ones(len(rows), dtype=bool)
    for field, value in zip(group_fields, key):
        if value is None:
            mask &= rows[field].isna().to_numpy()
        else:
            mask &= (rows[field] == value).to_numpy()
    return rows[mask]

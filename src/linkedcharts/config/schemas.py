"""Schema definitions for raw chart payloads and panel status."""

from typing import Any, Dict, List, Optional, TypedDict


class StreamlitPoint(TypedDict, total=False):
    """One point of ``st.plotly_chart(on_select=...)`` selection state."""
    curve_number: int
    point_number: int
    point_index: int
    x: Any
    y: Any


class PlotlyJsPoint(TypedDict, total=False):
    """One point of a plotly.js ``plotly_click``/``plotly_hover``/``plotly_selected`` event."""
    curveNumber: int
    pointNumber: int
    pointIndex: int
    x: Any
    y: Any


class SelectionPayload(TypedDict, total=False):
    points: List[Dict[str, Any]]
    point_indices: List[int]
    box: List[Dict[str, Any]]
    lasso: List[Dict[str, Any]]


class PanelStatus(TypedDict, total=False):
    status: str               # "success" | "no_selection" | "load_error"
    selected_count: int
    group_count: int
    message: Optional[str]

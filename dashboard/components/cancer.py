"""
Breast cancer selection-coupling panel.

Scatter of two features (one trace per class) -> box/lasso selection ->
bar chart of selected records per class -> click a bar -> box plot of one
feature for only that class's selected records.
Use `render_panel()` to draw the panel inside a Streamlit page.
"""

from typing import Any, List, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from linkedcharts.config.config import (
    CANCER_BAR_SOURCE,
    CANCER_CLASS_FIELD,
    CANCER_CLASSES,
    CANCER_SCATTER_SOURCE,
    CHART_HEIGHT,
)
from linkedcharts.config.models import DashboardConfig
from linkedcharts.config.schemas import PanelStatus
from linkedcharts.coupling.errors import ContractViolationError
from linkedcharts.coupling.events import ChartEvent, EventKind
from linkedcharts.coupling.interpreter import EventInterpreter, TraceMapping
from linkedcharts.coupling.views import DerivedView, rows_for_key
from linkedcharts.data_pipeline.loaders import (
    DatasetLoadError,
    feature_columns,
    load_breast_cancer_dataset,
)
from linkedcharts.runtime.reactive import (
    CONTRACT_ERROR,
    CoupledResult,
    CouplingSession,
    coupling_stage,
)
from linkedcharts.utils.logging import get_logger
from components.layout import (
    apply_custom_css,
    class_color,
    render_contract_error,
    render_load_error,
    render_placeholder,
    render_view_table,
)

logger = get_logger(__name__)

GROUP_FIELDS: List[str] = [CANCER_CLASS_FIELD]
SELECTION_KEY = "cancer.selected"          # published hop-1 result
SELECTION_OUTPUT = "cancer.class_counts"
CLASS_ROWS_OUTPUT = "cancer.class_rows"

# Trace i of the scatter is drawn from (and decoded through) group i.
SCATTER_MAPPING = TraceMapping.by_values(CANCER_CLASS_FIELD, CANCER_CLASSES)
# The class bar chart is a single trace; bar i is row i of the view frame.
BAR_MAPPING = TraceMapping.single("classes")


@st.cache_data(show_spinner="Loading breast cancer data...")
def _cached_dataset(csv_path: Optional[str]) -> pd.DataFrame:
    return load_breast_cancer_dataset(csv_path)


def build_scatter_figure(
    dataset: pd.DataFrame,
    x: str,
    y: str,
    mapping: TraceMapping = SCATTER_MAPPING,
    height: int = CHART_HEIGHT,
) -> go.Figure:
    """Feature scatter with one trace per mapping group, in mapping order."""
    fig = go.Figure()
    for group, rows in mapping.subgroups(dataset):
        fig.add_trace(go.Scatter(
            x=rows[x],
            y=rows[y],
            mode="markers",
            name=group.label,
            marker=dict(color=class_color(group.label), size=7, opacity=0.7),
            hovertemplate=f"{x}: %{{x}}<br>{y}: %{{y}}<extra>{group.label}</extra>",
        ))
    fig.update_layout(
        height=height,
        dragmode="select",
        xaxis_title=x,
        yaxis_title=y,
        legend_title_text=CANCER_CLASS_FIELD,
        margin=dict(l=40, r=20, t=30, b=40),
    )
    return fig


def build_class_bar_figure(view: DerivedView, height: int = CHART_HEIGHT) -> go.Figure:
    """Single-trace bar chart of selected records per class, in view order."""
    labels = [view.label_of(key) for key in view]
    fig = go.Figure(go.Bar(
        x=labels,
        y=[view[key] for key in view],
        marker_color=[class_color(label) for label in labels],
        text=[view[key] for key in view],
        textposition="auto",
        hovertemplate="%{x}: %{y} selected<extra></extra>",
    ))
    fig.update_layout(
        height=height,
        xaxis_title=CANCER_CLASS_FIELD,
        yaxis_title="Selected records",
        clickmode="event+select",
        margin=dict(l=40, r=20, t=30, b=40),
    )
    return fig


def build_box_figure(rows: pd.DataFrame, feature: str, height: int = CHART_HEIGHT) -> go.Figure:
    """Box plot of ``feature`` with one box per class present in ``rows``."""
    fig = go.Figure()
    for label in CANCER_CLASSES:
        subset = rows[rows[CANCER_CLASS_FIELD] == label]
        if subset.empty:
            continue
        fig.add_trace(go.Box(
            y=subset[feature],
            name=label,
            marker_color=class_color(label),
            boxpoints="all",
            jitter=0.3,
        ))
    fig.update_layout(
        height=height,
        yaxis_title=feature,
        showlegend=False,
        margin=dict(l=40, r=20, t=30, b=40),
    )
    return fig


def class_rows_stage(selection_key: str = SELECTION_KEY):
    """
    Compute function for the second hop.

    Decodes the clicked bar(s) against the published first-hop view and
    routes only the matching classes' selected rows onward.
    """
    interpreter = EventInterpreter(CANCER_BAR_SOURCE, BAR_MAPPING)

    def compute(event: Optional[ChartEvent], session: CouplingSession) -> CoupledResult:
        upstream: Optional[CoupledResult] = session.latest(selection_key)
        if upstream is None or upstream.view is None:
            raise ContractViolationError(
                f"bar click from {CANCER_BAR_SOURCE!r} arrived before any selection was published"
            )
        view_keys = list(upstream.view)
        # to_frame() is positional, so each bar row's index is its view key's position
        bars = interpreter.interpret(event, upstream.view.to_frame())
        keys = list(dict.fromkeys(view_keys[pos] for pos in bars.index))
        if not keys:
            return CoupledResult(rows=upstream.rows.iloc[0:0], view=None, event=event)
        parts = [rows_for_key(upstream.rows, upstream.view.group_fields, key) for key in keys]
        return CoupledResult(rows=pd.concat(parts), view=None, event=event)

    return compute


def _read_event(state: Any, source_id: str, kind: EventKind) -> Optional[ChartEvent]:
    return ChartEvent.from_payload(source_id, kind, state)


def render_panel(
    session: CouplingSession,
    *,
    config: Optional[DashboardConfig] = None,
) -> PanelStatus:
    """
    Render the breast cancer coupling panel.

    Args:
        session: Per-user coupling session (kept in ``st.session_state``)
        config: Dashboard configuration (defaults if None)

    Returns:
        Dictionary with panel status for the sidebar
    """
    config = config or DashboardConfig()
    apply_custom_css()
    st.header("🔬 Breast Cancer: Selection Coupling")
    st.markdown(
        "Drag a box or lasso over the scatter plot. The bar chart counts the "
        "selected records per diagnosis; click a bar to see one feature's "
        "distribution for that class only."
    )

    try:
        dataset = _cached_dataset(config.cancer_csv_path)
    except DatasetLoadError as e:
        logger.error(f"Breast cancer data unavailable: {e}")
        if render_load_error(e, key="cancer_reload"):
            _cached_dataset.clear()
            st.rerun()
        return {"status": "load_error", "message": str(e)}

    features = feature_columns(dataset)
    col_x, col_y, col_box = st.columns(3)
    with col_x:
        x = st.selectbox("X axis", features, index=_index_of(features, config.cancer_default_x))
    with col_y:
        y = st.selectbox("Y axis", features, index=_index_of(features, config.cancer_default_y))
    with col_box:
        box_feature = st.selectbox(
            "Box plot feature", features,
            index=_index_of(features, config.cancer_default_box_feature),
        )

    # ---- Hop 1: scatter selection -> class counts
    st.subheader("1️⃣ Select records")
    scatter_state = st.plotly_chart(
        build_scatter_figure(dataset, x, y, height=config.chart_height),
        key=CANCER_SCATTER_SOURCE,
        on_select="rerun",
        selection_mode=("box", "lasso"),
        use_container_width=True,
    )
    selection_event = _read_event(scatter_state, CANCER_SCATTER_SOURCE, EventKind.SELECTED)

    counts = session.output(
        SELECTION_OUTPUT,
        CANCER_SCATTER_SOURCE,
        coupling_stage(EventInterpreter(CANCER_SCATTER_SOURCE, SCATTER_MAPPING), dataset, GROUP_FIELDS),
        publish_as=SELECTION_KEY,
    )
    status = counts.trigger(selection_event, session, inputs=(x, y))

    col_bar, col_box_plot = st.columns(2)
    with col_bar:
        st.subheader("2️⃣ Records per class")
        if status == CONTRACT_ERROR:
            render_contract_error(counts.error)
        if not counts.has_result:
            render_placeholder("Select points in the scatter plot to count them per class.")
            return {"status": "no_selection", "selected_count": 0, "group_count": 0}

        result: CoupledResult = counts.result
        bar_state = st.plotly_chart(
            build_class_bar_figure(result.view, height=config.chart_height),
            key=CANCER_BAR_SOURCE,
            on_select="rerun",
            selection_mode=("points",),
            use_container_width=True,
        )
        render_view_table(result.view, caption=f"{result.view.total} record(s) selected")

    # ---- Hop 2: bar click -> class rows -> box plot
    bar_event = _read_event(bar_state, CANCER_BAR_SOURCE, EventKind.CLICKED)
    class_rows = session.output(CLASS_ROWS_OUTPUT, CANCER_BAR_SOURCE, class_rows_stage())
    class_status = class_rows.trigger(bar_event, session, inputs=(x, y, box_feature, counts.renders))

    with col_box_plot:
        st.subheader("3️⃣ Feature distribution")
        if class_status == CONTRACT_ERROR:
            render_contract_error(class_rows.error)
        if class_rows.has_result:
            st.plotly_chart(
                build_box_figure(class_rows.result.rows, box_feature, height=config.chart_height),
                use_container_width=True,
            )
        else:
            render_placeholder("Click a bar to inspect that class's selected records.")

    return {
        "status": "success",
        "selected_count": result.view.total,
        "group_count": len(result.view),
    }


def _index_of(options: Sequence[str], value: str) -> int:
    return list(options).index(value) if value in options else 0

"""
Stock price coupling panel.

Closing-price lines (one trace per ticker) -> box/lasso selection or point
clicks -> per-ticker summary of the picked trading days.
"""

from datetime import date
from typing import Any, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from linkedcharts.config.config import (
    CHART_HEIGHT,
    STOCK_LINE_SOURCE,
    STOCK_SUMMARY_FIELD,
    SUMMARY_FUNCS,
)
from linkedcharts.config.models import DashboardConfig
from linkedcharts.config.schemas import PanelStatus
from linkedcharts.coupling.events import ChartEvent, EventKind
from linkedcharts.coupling.interpreter import EventInterpreter, TraceMapping
from linkedcharts.coupling.views import DerivedView
from linkedcharts.data_pipeline.loaders import DatasetLoadError, load_stock_prices
from linkedcharts.runtime.reactive import CONTRACT_ERROR, CoupledResult, CouplingSession, coupling_stage
from linkedcharts.utils.logging import get_logger
from components.layout import (
    apply_custom_css,
    render_contract_error,
    render_load_error,
    render_placeholder,
    render_view_table,
    ticker_color,
)

logger = get_logger(__name__)

SUMMARY_OUTPUT = "stocks.ticker_summary"
EVENT_MODES = {
    "Box / lasso selection": (EventKind.SELECTED, ("box", "lasso")),
    "Click points": (EventKind.CLICKED, ("points",)),
}


@st.cache_data(show_spinner="Fetching prices...")
def _cached_prices(
    tickers: tuple,
    start: str,
    end: str,
    csv_path: Optional[str],
    cache_dir: Optional[str],
) -> pd.DataFrame:
    return load_stock_prices(tickers, start, end, csv_path=csv_path, cache_dir=cache_dir)


def ticker_mapping(tickers: Sequence[str]) -> TraceMapping:
    """Trace i of the price chart shows ``tickers[i]``."""
    return TraceMapping.by_values("Ticker", list(tickers))


def build_price_figure(
    prices: pd.DataFrame,
    mapping: TraceMapping,
    field: str = STOCK_SUMMARY_FIELD,
    height: int = CHART_HEIGHT,
) -> go.Figure:
    """Price lines with one trace per mapping group, in mapping order."""
    fig = go.Figure()
    for i, (group, rows) in enumerate(mapping.subgroups(prices)):
        fig.add_trace(go.Scatter(
            x=rows["Date"],
            y=rows[field],
            mode="lines+markers",
            name=group.label,
            line=dict(color=ticker_color(i), width=1.5),
            marker=dict(size=4),
            hovertemplate=f"%{{x|%Y-%m-%d}}<br>{field}: %{{y:.2f}}<extra>{group.label}</extra>",
        ))
    fig.update_layout(
        height=height,
        dragmode="select",
        hovermode="closest",
        yaxis_title=field,
        margin=dict(l=40, r=20, t=30, b=40),
    )
    return fig


def build_summary_figure(view: DerivedView, tickers: Sequence[str], height: int = CHART_HEIGHT) -> go.Figure:
    """Bar of each ticker's summarised value; bar text shows the day count."""
    order = {t: i for i, t in enumerate(tickers)}
    labels = [view.label_of(key) for key in view]
    fig = go.Figure(go.Bar(
        x=labels,
        y=[view.summary_of(key) for key in view],
        marker_color=[ticker_color(order.get(label, 0)) for label in labels],
        text=[f"{view[key]} day(s)" for key in view],
        textposition="auto",
    ))
    fig.update_layout(
        height=height,
        yaxis_title=view.summary_column,
        margin=dict(l=40, r=20, t=30, b=40),
    )
    return fig


def selected_days_table(rows: pd.DataFrame, field: str = STOCK_SUMMARY_FIELD) -> pd.DataFrame:
    """Picked rows as a date-sorted display table."""
    table = rows[["Date", "Ticker", field]].sort_values(["Date", "Ticker"], kind="stable")
    table = table.assign(Date=table["Date"].dt.strftime("%Y-%m-%d"))
    return table.reset_index(drop=True)


def render_panel(
    session: CouplingSession,
    *,
    config: Optional[DashboardConfig] = None,
) -> PanelStatus:
    """
    Render the stock price coupling panel.

    Args:
        session: Per-user coupling session (kept in ``st.session_state``)
        config: Dashboard configuration (defaults if None)

    Returns:
        Dictionary with panel status for the sidebar
    """
    config = config or DashboardConfig()
    apply_custom_css()
    st.header("📈 Stock Prices: Event Coupling")

    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        tickers = st.multiselect(
            "Tickers", list(config.stock_tickers), default=list(config.stock_default_tickers)
        )
    with col2:
        start = st.date_input("From", value=date.fromisoformat(config.stock_start))
    with col3:
        end = st.date_input("To", value=date.fromisoformat(config.stock_end))

    col4, col5 = st.columns(2)
    with col4:
        mode = st.radio("Interaction", list(EVENT_MODES), horizontal=True)
    with col5:
        summary = st.selectbox("Summary", list(SUMMARY_FUNCS), index=0)

    if not tickers:
        render_placeholder("Pick at least one ticker.")
        return {"status": "no_selection", "selected_count": 0, "group_count": 0}

    try:
        prices = _cached_prices(
            tuple(tickers), start.isoformat(), end.isoformat(),
            config.stock_csv_path, config.stock_cache_dir,
        )
    except DatasetLoadError as e:
        logger.error(f"Stock prices unavailable: {e}")
        if render_load_error(e, key="stocks_reload"):
            _cached_prices.clear()
            st.rerun()
        return {"status": "load_error", "message": str(e)}

    kind, selection_mode = EVENT_MODES[mode]
    mapping = ticker_mapping(tickers)
    state: Any = st.plotly_chart(
        build_price_figure(prices, mapping, height=config.chart_height),
        key=STOCK_LINE_SOURCE,
        on_select="rerun",
        selection_mode=selection_mode,
        use_container_width=True,
    )
    event = ChartEvent.from_payload(STOCK_LINE_SOURCE, kind, state)

    output = session.output(
        SUMMARY_OUTPUT,
        STOCK_LINE_SOURCE,
        coupling_stage(
            EventInterpreter(STOCK_LINE_SOURCE, mapping),
            prices,
            ["Ticker"],
            value_field=STOCK_SUMMARY_FIELD,
            summary=summary,
        ),
    )
    status = output.trigger(
        event, session, inputs=(tuple(tickers), start, end, mode, summary)
    )

    if status == CONTRACT_ERROR:
        render_contract_error(output.error)
    if not output.has_result:
        render_placeholder("Select or click price points to summarise them per ticker.")
        return {"status": "no_selection", "selected_count": 0, "group_count": 0}

    result: CoupledResult = output.result
    col_chart, col_table = st.columns([3, 2])
    with col_chart:
        st.subheader(f"{summary.title()} {STOCK_SUMMARY_FIELD} of picked days")
        st.plotly_chart(
            build_summary_figure(result.view, tickers, height=config.chart_height),
            use_container_width=True,
        )
    with col_table:
        st.subheader("Per ticker")
        render_view_table(result.view)
        with st.expander(f"Picked days ({len(result.rows)})"):
            st.dataframe(selected_days_table(result.rows), hide_index=True, use_container_width=True)

    return {
        "status": "success",
        "selected_count": result.view.total,
        "group_count": len(result.view),
    }

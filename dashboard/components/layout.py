"""
Shared layout helpers for dashboard components.

Provides common UI utilities for colors, placeholders, error states and
derived-view tables so every coupled panel looks and reports the same way.
"""

from typing import Optional

import pandas as pd
import streamlit as st

from linkedcharts.config.config import CLASS_COLORS, TICKER_PALETTE
from linkedcharts.coupling.errors import ContractViolationError
from linkedcharts.coupling.views import DerivedView


def class_color(label: str) -> str:
    """
    Get the display color for a diagnosis class.

    Args:
        label: Class label ("malignant" / "benign")

    Returns:
        Hex color string, grey for unknown labels
    """
    return CLASS_COLORS.get(label, "#6C757D")


def ticker_color(position: int) -> str:
    """Color for the ticker drawn as trace ``position``."""
    return TICKER_PALETTE[position % len(TICKER_PALETTE)]


def render_placeholder(message: str) -> None:
    """Render the empty state shown before any coupling event arrived."""
    st.info(f"👆 {message}")


def render_contract_error(error: ContractViolationError) -> None:
    """
    Render a coupling contract violation.

    Kept visually distinct from the "nothing selected" placeholder: it means
    the chart and its consumer are configured inconsistently.
    """
    st.error(f"🧩 **Chart coupling error**: {error}")
    st.caption("The previous result is still shown below, if there was one.")


def render_load_error(error: Exception, *, key: str) -> bool:
    """
    Render a dataset load failure with a manual reload button.

    Args:
        error: The load failure
        key: Widget key for the reload button

    Returns:
        True if the user asked to reload
    """
    st.error(f"❌ **Could not load data**: {error}")
    return st.button("🔄 Retry loading", key=key)


def view_table(view: DerivedView) -> pd.DataFrame:
    """Derived view as a display table with friendly column names."""
    frame = view.to_frame()
    return frame.rename(columns={"count": "Records"})


def render_view_table(view: DerivedView, caption: Optional[str] = None) -> None:
    """Render a derived view as a compact table."""
    st.dataframe(view_table(view), hide_index=True, use_container_width=True)
    if caption:
        st.caption(caption)


def apply_custom_css() -> None:
    """Apply custom CSS styling for compact layout."""
    st.markdown("""
    <style>
    .stMetric {
        background-color: #f0f2f6;
        border: 1px solid #e6e9ef;
        padding: 0.5rem;
        border-radius: 0.25rem;
    }

    div[data-testid="stPlotlyChart"] {
        border: 1px solid #e6e9ef;
        border-radius: 0.25rem;
    }
    </style>
    """, unsafe_allow_html=True)

"""
Linked Charts Dashboard - Streamlit Application

Example dashboards where interacting with one chart drives the next.
Run with ``streamlit run dashboard/app.py``.
"""

import sys
from pathlib import Path

import streamlit as st

# Add current directory to path for local imports
dashboard_path = Path(__file__).parent
sys.path.insert(0, str(dashboard_path))

from components import cancer, stocks

from linkedcharts.config.config import DASHBOARD_CONFIG_PATH, LOG_FILE, LOG_LEVEL
from linkedcharts.config.models import DashboardConfig
from linkedcharts.runtime.reactive import CouplingSession
from linkedcharts.utils.logging import dashboard_logger, setup_logging

SESSION_KEY = "coupling_session"
PANELS = (
    "🔬 Breast Cancer (selection)",
    "📈 Stock Prices (click / select)",
    "📋 About",
)


@st.cache_resource
def _configure() -> DashboardConfig:
    """One-off process setup: logging and YAML overrides."""
    setup_logging(LOG_LEVEL, LOG_FILE)
    config = DashboardConfig.from_yaml(DASHBOARD_CONFIG_PATH)
    dashboard_logger.info(f"Dashboard configured (config file: {DASHBOARD_CONFIG_PATH or 'none'})")
    return config


def get_session() -> CouplingSession:
    """Coupling state for this browser session."""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = CouplingSession()
    return st.session_state[SESSION_KEY]


def main():
    """Main dashboard application."""

    # Page configuration
    st.set_page_config(
        page_title="Linked Charts",
        page_icon="🔗",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    config = _configure()
    session = get_session()

    # Main title
    st.title("🔗 Linked Charts")
    st.markdown("Interact with one chart to filter and summarise the data shown in the next.")

    # Sidebar navigation
    st.sidebar.title("🧭 Navigation")
    panel_option = st.sidebar.selectbox("Select Panel:", options=PANELS, index=0)

    if st.sidebar.button("🔄 Reload data"):
        st.cache_data.clear()
        st.rerun()

    # Main content area
    if panel_option == PANELS[0]:
        render_coupled_panel(cancer.render_panel, session, config, "🔬 Selection Status")
    elif panel_option == PANELS[1]:
        render_coupled_panel(stocks.render_panel, session, config, "📈 Selection Status")
    else:
        render_about_panel(config)


def render_coupled_panel(render, session: CouplingSession, config: DashboardConfig, title: str):
    """Render one coupled panel and report its status in the sidebar."""
    try:
        panel_result = render(session, config=config)

        st.sidebar.subheader(title)
        status = panel_result.get("status", "unknown")

        if status == "success":
            st.sidebar.success(
                f"✅ {panel_result.get('selected_count', 0)} record(s) in "
                f"{panel_result.get('group_count', 0)} group(s)"
            )
        elif status == "no_selection":
            st.sidebar.info("ℹ️ Nothing selected yet")
        elif status == "load_error":
            st.sidebar.error("❌ Data unavailable")
        else:
            st.sidebar.info(f"ℹ️ Status: {status}")

    except Exception as e:
        dashboard_logger.exception("Panel failed")
        st.error(f"❌ Error rendering panel: {e}")
        st.sidebar.error("❌ Panel Error")


def render_about_panel(config: DashboardConfig):
    """Render the about/information panel."""
    st.header("📋 About Linked Charts")

    st.markdown("""
    ### 🎯 Purpose
    Each page couples charts: a selection, click or hover on one chart is
    mapped back to the underlying rows, summarised, and shown in the next.

    ### 📊 Pages

    #### Breast Cancer (selection)
    - **Scatter**: two chosen features, one trace per diagnosis
    - **Box / lasso selection** → records per class (bar chart)
    - **Click a bar** → feature distribution for that class only (box plot)

    #### Stock Prices (click / select)
    - **Closing prices**: one line per ticker
    - **Select or click points** → per-ticker day count and price summary

    ### 🔧 Technical Details
    - Built with Streamlit and Plotly
    - Events carry a source tag; consumers reject events from other charts
    - Trace order is declared once and shared by chart and event decoder
    - Empty selections keep the last result; configuration mismatches are reported separately
    """)

    st.subheader("⚙️ Current Configuration")
    col1, col2 = st.columns(2)
    with col1:
        st.code(f"""
Cancer CSV: {config.cancer_csv_path or 'scikit-learn bundle'}
Default axes: {config.cancer_default_x} / {config.cancer_default_y}
Box feature: {config.cancer_default_box_feature}
        """)
    with col2:
        st.code(f"""
Tickers: {', '.join(config.stock_tickers)}
Range: {config.stock_start} to {config.stock_end}
Price source: {config.stock_csv_path or 'Yahoo Finance'}
        """)


if __name__ == "__main__":
    main()

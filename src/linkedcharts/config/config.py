"""Project-wide single-source configuration constants for the linked dashboards."""

import os
from pathlib import Path

from dotenv import load_dotenv

from linkedcharts.utils.path_utils import find_repo_root

# ----- Base directory configuration -------
PROJECT_ROOT = find_repo_root()
load_dotenv(PROJECT_ROOT / ".env")

DATA_DIR: Path = Path(os.getenv("LINKEDCHARTS_DATA_DIR", PROJECT_ROOT / "datasets"))
LOG_LEVEL: str = os.getenv("LINKEDCHARTS_LOG_LEVEL", "INFO")
LOG_FILE: str | None = os.getenv("LINKEDCHARTS_LOG_FILE") or None
DASHBOARD_CONFIG_PATH: str | None = os.getenv("LINKEDCHARTS_CONFIG") or None

# ------ Source tags (one per event-emitting chart) -------
CANCER_SCATTER_SOURCE: str = "cancer_scatter"   # primary: feature scatter, box/lasso selection
CANCER_BAR_SOURCE: str = "cancer_class_bar"     # secondary: per-class counts, click
STOCK_LINE_SOURCE: str = "stock_close_line"     # primary: closing prices per ticker

# ------- Breast cancer dataset -------
CANCER_CSV_PATH: str | None = os.getenv("LINKEDCHARTS_CANCER_CSV") or None  # None -> scikit-learn bundle
CANCER_CLASS_FIELD: str = "Class"
CANCER_CLASSES: tuple[str, ...] = ("malignant", "benign")  # trace order of the scatter
CANCER_DEFAULT_X: str = "mean radius"
CANCER_DEFAULT_Y: str = "mean texture"
CANCER_DEFAULT_BOX_FEATURE: str = "mean area"

# ------- Stock prices -------
STOCK_CSV_PATH: str | None = os.getenv("LINKEDCHARTS_STOCK_CSV") or None  # local path or URL
STOCK_TICKERS: tuple[str, ...] = ("AAPL", "MSFT", "GOOGL", "AMZN")
STOCK_DEFAULT_TICKERS: tuple[str, ...] = ("AAPL", "MSFT")
STOCK_START: str = "2023-01-01"
STOCK_END: str = "2023-12-31"
STOCK_FIELDS: tuple[str, ...] = ("Open", "High", "Low", "Close", "Volume")
STOCK_SUMMARY_FIELD: str = "Close"
STOCK_FETCH_ATTEMPTS: int = 3       # yfinance download attempts
STOCK_FETCH_DELAY_S: float = 2.0    # pause between attempts

# ------- Derived view summaries -------
SUMMARY_FUNCS: tuple[str, ...] = ("mean", "median", "sum", "min", "max")

# ------- Presentation -------
CLASS_COLORS: dict[str, str] = {
    "malignant": "#C73E1D",
    "benign": "#2E86AB",
}
TICKER_PALETTE: tuple[str, ...] = ("#2E86AB", "#F18F01", "#8B5A9B", "#3B8B5A", "#C73E1D", "#6C757D")
CHART_HEIGHT: int = 420

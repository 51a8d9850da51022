"""Test configuration and shared fixtures."""

import pandas as pd
import pytest

from linkedcharts.coupling.interpreter import TraceMapping
from linkedcharts.runtime.reactive import CouplingSession


@pytest.fixture
def cancer_frame():
    """Small breast-cancer-like dataset with interleaved classes.

    Row order:   0 M, 1 B, 2 M, 3 B, 4 B, 5 M, 6 B, 7 M, 8 B
    malignant subgroup positions -> rows 0, 2, 5, 7
    benign subgroup positions    -> rows 1, 3, 4, 6, 8
    """
    classes = ["malignant", "benign", "malignant", "benign", "benign",
               "malignant", "benign", "malignant", "benign"]
    return pd.DataFrame({
        "mean radius": [17.9, 11.4, 20.5, 12.4, 13.0, 19.6, 12.1, 18.2, 10.9],
        "mean texture": [10.4, 14.4, 21.2, 15.7, 18.4, 21.3, 17.9, 20.3, 12.4],
        "mean area": [1001.0, 404.0, 1297.0, 477.0, 523.0, 1203.0, 449.0, 1040.0, 360.0],
        "Class": classes,
    })


@pytest.fixture
def class_mapping():
    return TraceMapping.by_values("Class", ["malignant", "benign"])


@pytest.fixture
def stock_frame():
    """Long-format prices for two tickers over three trading days."""
    dates = pd.to_datetime(["2023-01-03", "2023-01-04", "2023-01-05"])
    rows = []
    for ticker, base in (("AAPL", 125.0), ("MSFT", 240.0)):
        for i, d in enumerate(dates):
            close = base + i
            rows.append({
                "Date": d, "Ticker": ticker,
                "Open": close - 1, "High": close + 1, "Low": close - 2,
                "Close": close, "Volume": 1_000_000 + i,
            })
    return pd.DataFrame(rows)


@pytest.fixture
def session():
    return CouplingSession()


def selection_payload(*points):
    """Streamlit ``on_select`` state for ``(curve, point)`` pairs."""
    return {
        "selection": {
            "points": [
                {"curve_number": c, "point_number": p, "point_index": p, "x": None, "y": None}
                for c, p in points
            ],
            "point_indices": [p for _, p in points],
            "box": [],
            "lasso": [],
        }
    }


@pytest.fixture
def make_selection():
    return selection_payload

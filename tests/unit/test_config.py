"""Tests for dashboard configuration loading."""

from linkedcharts.config import config
from linkedcharts.config.models import DashboardConfig
from linkedcharts.utils.io import maybe_load_yaml


def test_defaults_match_constants():
    cfg = DashboardConfig()
    assert cfg.cancer_default_x == config.CANCER_DEFAULT_X
    assert cfg.stock_tickers == config.STOCK_TICKERS
    assert cfg.chart_height == config.CHART_HEIGHT


def test_from_yaml_overrides(tmp_path):
    path = tmp_path / "dashboard.yaml"
    path.write_text(
        "dashboard:\n"
        "  stock_tickers: [NVDA, AMD]\n"
        "  stock_default_tickers: [NVDA]\n"
        "  chart_height: 300\n"
        "  theme: dark\n",
        encoding="utf-8",
    )

    cfg = DashboardConfig.from_yaml(path)

    assert cfg.stock_tickers == ("NVDA", "AMD")
    assert cfg.stock_default_tickers == ("NVDA",)
    assert cfg.chart_height == 300
    assert cfg.cancer_default_y == config.CANCER_DEFAULT_Y
    assert cfg.extra == {"theme": "dark"}


def test_from_yaml_missing_or_invalid_file(tmp_path):
    assert DashboardConfig.from_yaml(None) == DashboardConfig()
    assert DashboardConfig.from_yaml(tmp_path / "missing.yaml") == DashboardConfig()

    broken = tmp_path / "broken.yaml"
    broken.write_text("dashboard: [unclosed\n", encoding="utf-8")
    assert maybe_load_yaml(broken) == {}

    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("just a string\n", encoding="utf-8")
    assert maybe_load_yaml(scalar) == {}


def test_scatter_trace_order_is_class_order():
    assert config.CANCER_CLASSES == ("malignant", "benign")
    assert set(config.CLASS_COLORS) == set(config.CANCER_CLASSES)

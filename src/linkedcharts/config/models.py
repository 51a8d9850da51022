"""Configuration models and data structures."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from linkedcharts.config.config import (
    CANCER_CSV_PATH,
    CANCER_DEFAULT_BOX_FEATURE,
    CANCER_DEFAULT_X,
    CANCER_DEFAULT_Y,
    CHART_HEIGHT,
    DATA_DIR,
    STOCK_CSV_PATH,
    STOCK_DEFAULT_TICKERS,
    STOCK_END,
    STOCK_START,
    STOCK_TICKERS,
)
from linkedcharts.utils.io import maybe_load_yaml


@dataclass
class DashboardConfig:
    """Dashboard configuration with YAML override support."""
    cancer_csv_path: Optional[str] = CANCER_CSV_PATH
    cancer_default_x: str = CANCER_DEFAULT_X
    cancer_default_y: str = CANCER_DEFAULT_Y
    cancer_default_box_feature: str = CANCER_DEFAULT_BOX_FEATURE
    stock_csv_path: Optional[str] = STOCK_CSV_PATH
    stock_tickers: tuple = STOCK_TICKERS
    stock_default_tickers: tuple = STOCK_DEFAULT_TICKERS
    stock_start: str = STOCK_START
    stock_end: str = STOCK_END
    stock_cache_dir: Optional[str] = str(DATA_DIR / "stock_cache")
    chart_height: int = CHART_HEIGHT
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, yaml_path: Optional[str | Path] = None) -> "DashboardConfig":
        """Create config with optional YAML overrides.

        Only the ``dashboard`` section of the file is read; unknown keys
        are kept in ``extra``.
        """
        yaml_config = maybe_load_yaml(yaml_path)
        section = yaml_config.get("dashboard", {}) if isinstance(yaml_config, dict) else {}
        if not isinstance(section, dict):
            section = {}

        defaults = cls()
        known = {
            name for name in cls.__dataclass_fields__ if name != "extra"
        }
        overrides = {k: v for k, v in section.items() if k in known}
        for key in ("stock_tickers", "stock_default_tickers"):
            if key in overrides:
                overrides[key] = tuple(overrides[key])

        config = cls(**{**{k: getattr(defaults, k) for k in known}, **overrides})
        config.extra = {k: v for k, v in section.items() if k not in known}
        return config

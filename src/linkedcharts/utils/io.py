"""Small file helpers shared by config and loaders."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from linkedcharts.utils.logging import get_logger

logger = get_logger(__name__)


def maybe_load_yaml(path: Optional[str | Path]) -> Dict[str, Any]:
    """Load YAML config file with fallback to empty dict."""
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        logger.warning(f"Config file not found: {p}")
        return {}
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring unreadable config file {p}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {p}: top level is not a mapping")
        return {}
    return data


def ensure_dir(path: str | Path) -> Path:
    """Ensure the directory exists and return the Path."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p
